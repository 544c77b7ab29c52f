from fastapi import APIRouter

from . import codes

router = APIRouter()

router.include_router(codes.router)
