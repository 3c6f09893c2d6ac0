"""
LifeStream Backend: Blog Routes
=================================

Creation and reads are public; status changes and deletes need an admin.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from lifestream.database import Database, get_database
from lifestream.middleware.auth import Identity, require_admin
from lifestream.schemas.common import DeleteAck, ErrorResponse, InsertAck, UpdateAck
from lifestream.services.blog_service import blog_service

router = APIRouter(tags=["Blogs"])

ADMIN_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Caller is not an admin", "model": ErrorResponse},
}


@router.post("/blogs", response_model=InsertAck, summary="Create a blog post")
async def create_blog(
    data: Dict[str, Any] = Body(...),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await blog_service.create_blog(db, data)


@router.get(
    "/blogs",
    summary="List blog posts",
    description="`blog_status=all` returns every post; any other value filters by exact status.",
)
async def list_blogs(
    blog_status: Optional[str] = Query(default=None),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await blog_service.list_blogs(db, blog_status)


@router.get("/blogs/{blog_id}")
async def get_blog(
    blog_id: str,
    db: Database = Depends(get_database),
) -> Optional[Dict[str, Any]]:
    return await blog_service.get_blog(db, blog_id)


@router.patch(
    "/blogs/{blog_id}",
    response_model=UpdateAck,
    responses=ADMIN_ERRORS,
    summary="Change blog_status (admin)",
)
async def update_blog_status(
    blog_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_admin),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await blog_service.update_status(db, blog_id, body)


@router.delete(
    "/blogs/{blog_id}",
    response_model=DeleteAck,
    responses=ADMIN_ERRORS,
    summary="Delete a blog post (admin)",
)
async def delete_blog(
    blog_id: str,
    identity: Identity = Depends(require_admin),
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await blog_service.delete_blog(db, blog_id)
