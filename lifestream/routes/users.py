"""
LifeStream Backend: User Routes
=================================

What:  Signup, admin user listing, role self-checks, donor search,
       profile lookup and the two update paths.

Auth per route:
    POST  /users                    none
    GET   /users                    token + admin
    GET   /users/admin/{email}      token, self only
    GET   /users/volunteer/{email}  token, self only
    GET   /users/donors             none
    GET   /user                     token
    PATCH /users/{user_id}          token
    PATCH /all-users/{user_id}      token + admin
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from lifestream.database import Database, get_database
from lifestream.middleware.auth import (
    Identity,
    ensure_self,
    require_admin,
    require_token,
)
from lifestream.schemas.common import (
    AdminCheck,
    ErrorResponse,
    InsertAck,
    UpdateAck,
    VolunteerCheck,
)
from lifestream.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

AUTH_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Forbidden", "model": ErrorResponse},
}


@router.post("/users", response_model=InsertAck, summary="Create a user record")
async def create_user(
    data: Dict[str, Any] = Body(...),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await user_service.create_user(db, data)


@router.get(
    "/users",
    responses=AUTH_ERRORS,
    summary="List users (admin)",
    description="`status=all` returns every user; any other value filters by exact status.",
)
async def list_users(
    status: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_admin),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await user_service.list_users(db, status)


@router.get("/users/admin/{email}", response_model=AdminCheck, responses=AUTH_ERRORS)
async def check_admin(
    email: str,
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> AdminCheck:
    ensure_self(identity, email)
    return AdminCheck(admin=await user_service.has_role(db, email, "admin"))


@router.get("/users/volunteer/{email}", response_model=VolunteerCheck, responses=AUTH_ERRORS)
async def check_volunteer(
    email: str,
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> VolunteerCheck:
    ensure_self(identity, email)
    return VolunteerCheck(volunteer=await user_service.has_role(db, email, "volunteer"))


@router.get(
    "/users/donors",
    summary="Search donors",
    description=(
        "Returns users with role 'donor'. Blood group and location narrow the "
        "search only when group, district and upazila are all given."
    ),
)
async def search_donors(
    group: Optional[str] = Query(default=None),
    district: Optional[str] = Query(default=None),
    upazila: Optional[str] = Query(default=None),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await user_service.search_donors(db, group, district, upazila)


@router.get("/user", responses=AUTH_ERRORS, summary="Get one user by email")
async def get_user(
    email: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Optional[Dict[str, Any]]:
    return await user_service.find_by_email(db, email)


@router.patch(
    "/users/{user_id}",
    response_model=UpdateAck,
    responses=AUTH_ERRORS,
    summary="Edit own profile fields",
)
async def update_profile(
    user_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await user_service.update_profile(db, user_id, body)


@router.patch(
    "/all-users/{user_id}",
    response_model=UpdateAck,
    responses=AUTH_ERRORS,
    summary="Change a user's status and/or role (admin)",
)
async def update_status_and_role(
    user_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_admin),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    logger.info("Admin %s editing user %s", identity.email, user_id)
    return await user_service.update_status_and_role(db, user_id, body)
