from fastapi import APIRouter

from api.v1.routes.commands import router as commands_router

# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(commands_router)
