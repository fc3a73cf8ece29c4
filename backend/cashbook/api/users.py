# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from cashbook.api.deps import AdminDep, AuthDep, IdentityDep
from cashbook.db import SessionDep
from cashbook.schemas.user import CreateUserPayload, CreateUserResponse, NextEmployeeIdResponse
from cashbook.services import provisioning as provisioning_service

users_router = APIRouter(tags=["users"])


@users_router.post("/create-user", response_model=CreateUserResponse)
async def create_user(
    payload: CreateUserPayload,
    session: SessionDep,
    auth: AuthDep,
    identity: IdentityDep,
) -> CreateUserResponse:
    """Provision a new account with an allocated employee ID (admin only)."""
    return await provisioning_service.create_user(session, auth, identity, payload)


@users_router.get("/users/next-employee-id", response_model=NextEmployeeIdResponse)
async def get_next_employee_id(session: SessionDep, auth: AdminDep) -> NextEmployeeIdResponse:
    """Preview the next employee ID for the add-user form."""
    return await provisioning_service.get_next_employee_id(session)
