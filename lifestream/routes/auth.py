"""
LifeStream Backend: Token Route
=================================

What:  POST /jwt signs the posted claim payload (expected `{"email": ...}`)
       and returns `{"token": ...}`. Unauthenticated.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body

from lifestream.schemas.common import TokenResponse
from lifestream.services.token_service import token_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/jwt",
    response_model=TokenResponse,
    summary="Issue an access token",
    description=(
        "Signs the request body as the token's claims with a one hour expiry. "
        "The email is not checked against stored users."
    ),
)
async def issue_token(claims: Dict[str, Any] = Body(...)) -> TokenResponse:
    return TokenResponse(token=token_service.issue(claims))
