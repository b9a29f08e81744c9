from intake.middleware.logging import LoggingMiddleware
from intake.middleware.request_id import RequestIdMiddleware

__all__ = ["LoggingMiddleware", "RequestIdMiddleware"]
