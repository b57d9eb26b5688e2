from .wines import router as wines_router
from .sommelier import router as sommelier_router
from .session import router as session_router

__all__ = ["wines_router", "sommelier_router", "session_router"]
