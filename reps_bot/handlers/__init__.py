from aiogram import Router

from .start import router as start_router
from .challenges import router as challenges_router
from .sessions import router as sessions_router


def setup_routers() -> Router:
    router = Router()
    router.include_router(start_router)
    router.include_router(challenges_router)
    router.include_router(sessions_router)
    return router
