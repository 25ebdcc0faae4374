"""HTTP API layer: routes, schemas, dependencies and error handling."""
