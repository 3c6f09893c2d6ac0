"""
LifeStream Backend: Donation Request Routes
=============================================

Auth per route:
    POST   /donations                 none
    GET    /donations/limit           token
    GET    /donations                 token
    GET    /all-donations             token + admin
    GET    /all-donations/volunteer   token + volunteer
    GET    /all-pending               none
    GET    /donations/{request_id}    token
    PATCH  /donations/{request_id}    token
    PUT    /donations/{request_id}    token (upsert)
    DELETE /donations/{request_id}    token

Mutations only require a valid token; they are not limited to the requester.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from lifestream.database import Database, get_database
from lifestream.middleware.auth import (
    Identity,
    require_admin,
    require_token,
    require_volunteer,
)
from lifestream.schemas.common import DeleteAck, ErrorResponse, InsertAck, UpdateAck
from lifestream.services.donation_service import donation_service

router = APIRouter(tags=["Donation Requests"])

AUTH_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Forbidden", "model": ErrorResponse},
}


@router.post("/donations", response_model=InsertAck, summary="Create a donation request")
async def create_donation(
    data: Dict[str, Any] = Body(...),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await donation_service.create_request(db, data)


# Registered before /donations/{request_id} so "limit" is not read as an id
@router.get(
    "/donations/limit",
    responses=AUTH_ERRORS,
    summary="Latest three requests of a requester",
)
async def recent_donations(
    email: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await donation_service.recent_for_requester(db, email)


@router.get("/donations", responses=AUTH_ERRORS, summary="A requester's donation requests")
async def list_donations(
    email: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await donation_service.list_for_requester(db, email, status)


@router.get("/all-donations", responses=AUTH_ERRORS, summary="All donation requests (admin)")
async def list_all_donations(
    status: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_admin),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await donation_service.list_all(db, status)


@router.get(
    "/all-donations/volunteer",
    responses=AUTH_ERRORS,
    summary="All donation requests (volunteer)",
)
async def list_all_donations_for_volunteer(
    status: Optional[str] = Query(default=None),
    identity: Identity = Depends(require_volunteer),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await donation_service.list_all(db, status)


@router.get("/all-pending", summary="Pending donation requests")
async def list_pending(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    return await donation_service.list_pending(db)


@router.get("/donations/{request_id}", responses=AUTH_ERRORS)
async def get_donation(
    request_id: str,
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Optional[Dict[str, Any]]:
    return await donation_service.get_request(db, request_id)


@router.patch(
    "/donations/{request_id}",
    response_model=UpdateAck,
    responses=AUTH_ERRORS,
    summary="Change donation_status",
)
async def update_donation_status(
    request_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await donation_service.update_status(db, request_id, body)


@router.put(
    "/donations/{request_id}",
    response_model=UpdateAck,
    responses=AUTH_ERRORS,
    summary="Replace a donation request, creating it if missing",
)
async def replace_donation(
    request_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await donation_service.replace_request(db, request_id, body)


@router.delete("/donations/{request_id}", response_model=DeleteAck, responses=AUTH_ERRORS)
async def delete_donation(
    request_id: str,
    identity: Identity = Depends(require_token),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await donation_service.delete_request(db, request_id)
