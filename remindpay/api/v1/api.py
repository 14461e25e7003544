from fastapi import APIRouter

from remindpay.api.v1.endpoints import auth
from remindpay.reminders.api import router as reminders_router

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(reminders_router, prefix="/reminders", tags=["reminders"])
