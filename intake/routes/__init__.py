# intake/routes/__init__.py
"""
API route handlers.
"""

from intake.routes.feedback import router as feedback_router
from intake.routes.health import router as health_router
from intake.routes.lead import router as lead_router

__all__ = [
    "feedback_router",
    "health_router",
    "lead_router",
]
