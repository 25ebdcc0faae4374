"""API route modules."""

from signalwatch.api.routes import alerts, connectivity, places

__all__ = ["alerts", "connectivity", "places"]
