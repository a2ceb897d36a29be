"""Community domain API package."""

from community.api.routes import event_router, meetup_router

__all__ = ["event_router", "meetup_router"]
