from .auth_router import router as auth_router
from .catalog_router import router as catalog_router
from .frontdesk_router import router as frontdesk_router
from .report_router import router as report_router
from .debug_router import router as debug_router

__all__ = [
    "auth_router",
    "catalog_router",
    "frontdesk_router",
    "report_router",
    "debug_router",
]
