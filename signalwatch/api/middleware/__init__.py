"""HTTP middleware."""

from signalwatch.api.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
