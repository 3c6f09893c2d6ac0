"""
LifeStream Backend: User Service
==================================

What:  Store operations behind the /users, /user and /all-users routes,
       plus the role lookup used by the authorization chain.
How:   Each method builds one filter/update document and makes one call
       against the `users` collection. Results are returned in wire form.

Update allow-lists:
    Self-service profile edit:  name, email, image, blood_group, district, upazila
    Admin edit:                 status, role (only the truthy ones are written)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from lifestream.database import Database, store_errors
from lifestream.services.query import (
    allow_listed_set,
    donor_search_filter,
    insert_ack,
    parse_object_id,
    serialize_document,
    status_filter,
    update_ack,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "image", "blood_group", "district", "upazila")
ADMIN_FIELDS = ("status", "role")


class UserService:
    """Stateless; every call receives the Database it works against."""

    async def create_user(self, db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert the posted record verbatim."""
        with store_errors("insert user"):
            result = await db.users.insert_one(data)
        logger.info("User created: %s", result.inserted_id)
        return insert_ack(result)

    async def list_users(self, db: Database, status: Optional[str]) -> List[Dict[str, Any]]:
        query = status_filter("status", status)
        with store_errors("list users", status=status):
            users = await db.users.find(query).to_list()
        return [serialize_document(user) for user in users]

    async def find_by_email(self, db: Database, email: Optional[str]) -> Optional[Dict[str, Any]]:
        with store_errors("find user by email"):
            user = await db.users.find_one({"email": email})
        return serialize_document(user)

    async def has_role(self, db: Database, email: Optional[str], role: str) -> bool:
        """
        Whether the stored user for `email` has exactly `role`.

        A missing user has no role.
        """
        user = await self.find_by_email(db, email)
        return bool(user) and user.get("role") == role

    async def search_donors(
        self,
        db: Database,
        group: Optional[str],
        district: Optional[str],
        upazila: Optional[str],
    ) -> List[Dict[str, Any]]:
        query = donor_search_filter(group, district, upazila)
        with store_errors("search donors"):
            donors = await db.users.find(query).to_list()
        return [serialize_document(donor) for donor in donors]

    async def update_profile(
        self, db: Database, user_id: str, body: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Apply the self-service allow-list; other body fields are ignored."""
        changes = allow_listed_set(body, PROFILE_FIELDS)
        oid = parse_object_id(user_id)
        with store_errors("update user profile", user_id=user_id):
            result = await db.users.update_one({"_id": oid}, {"$set": changes})
        logger.info("User %s profile updated: %s", user_id, sorted(changes))
        return update_ack(result)

    async def update_status_and_role(
        self, db: Database, user_id: str, body: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Admin edit: writes status and/or role, whichever is truthy in the body.

        With neither present the empty `$set` still goes to the store, which
        decides the outcome.
        """
        changes = {field: body[field] for field in ADMIN_FIELDS if body.get(field)}
        oid = parse_object_id(user_id)
        with store_errors("update user status/role", user_id=user_id):
            result = await db.users.update_one({"_id": oid}, {"$set": changes})
        logger.info("User %s admin edit: %s", user_id, changes)
        return update_ack(result)


user_service = UserService()
