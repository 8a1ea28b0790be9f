from fastapi import APIRouter

from text_transformer.api.routes import tasks, utils

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(tasks.router)
