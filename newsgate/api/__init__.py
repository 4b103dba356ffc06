"""HTTP surface: admin console, auth and public client routers."""
from fastapi import APIRouter

from . import admin, auth, client

router = APIRouter()
router.include_router(admin.router)
router.include_router(auth.router)
router.include_router(client.router)

__all__ = ["router"]
