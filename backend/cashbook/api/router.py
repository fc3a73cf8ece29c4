from fastapi import APIRouter

from cashbook.api.auth import auth_router
from cashbook.api.reports import reports_router
from cashbook.api.requests import requests_router
from cashbook.api.users import users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(requests_router)
api_router.include_router(reports_router)
api_router.include_router(users_router)
