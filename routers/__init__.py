from .auth import router as auth_router
from .poems import router as poems_router

__all__ = ["auth_router", "poems_router"]
