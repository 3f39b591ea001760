from fastapi import APIRouter
from portfolio.api.endpoints import contact

api_router = APIRouter(prefix="/api")

api_router.include_router(contact.router, tags=["Contact"])
