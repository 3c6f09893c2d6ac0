"""
LifeStream Backend: Donation Request Service
==============================================

What:  Store operations behind /donations, /all-donations and /all-pending.
How:   One call per method against the `donationRequests` collection.

Mutations (status patch, full replace, delete) are not restricted to the
requester: any authenticated caller may change any request by id.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from lifestream.database import Database, store_errors
from lifestream.services.query import (
    allow_listed_set,
    delete_ack,
    insert_ack,
    parse_object_id,
    serialize_document,
    status_filter,
    update_ack,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3
PENDING = "pending"

# Written in full by PUT /donations/{id}; absent fields are stored as null
REPLACEABLE_FIELDS = (
    "requester_name",
    "requester_email",
    "recipient_name",
    "recipient_district",
    "recipient_upazila",
    "hospital_name",
    "full_address",
    "group",
    "date",
    "time",
    "request_message",
    "donation_status",
)


class DonationService:

    async def create_request(self, db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
        with store_errors("insert donation request"):
            result = await db.donation_requests.insert_one(data)
        logger.info("Donation request created: %s", result.inserted_id)
        return insert_ack(result)

    async def recent_for_requester(
        self, db: Database, email: Optional[str]
    ) -> List[Dict[str, Any]]:
        """Newest requests of one requester, at most RECENT_LIMIT of them."""
        cursor = (
            db.donation_requests.find({"requester_email": email})
            .sort("_id", -1)
            .limit(RECENT_LIMIT)
        )
        with store_errors("recent donation requests"):
            requests = await cursor.to_list()
        return [serialize_document(doc) for doc in requests]

    async def list_for_requester(
        self, db: Database, email: Optional[str], status: Optional[str]
    ) -> List[Dict[str, Any]]:
        query = status_filter("donation_status", status, base={"requester_email": email})
        return await self._find(db, query)

    async def list_all(self, db: Database, status: Optional[str]) -> List[Dict[str, Any]]:
        return await self._find(db, status_filter("donation_status", status))

    async def list_pending(self, db: Database) -> List[Dict[str, Any]]:
        return await self._find(db, {"donation_status": PENDING})

    async def get_request(self, db: Database, request_id: str) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(request_id)
        with store_errors("get donation request", request_id=request_id):
            doc = await db.donation_requests.find_one({"_id": oid})
        return serialize_document(doc)

    async def update_status(
        self, db: Database, request_id: str, body: Mapping[str, Any]
    ) -> Dict[str, Any]:
        changes = allow_listed_set(body, ("donation_status",), fill_missing=True)
        oid = parse_object_id(request_id)
        with store_errors("update donation status", request_id=request_id):
            result = await db.donation_requests.update_one({"_id": oid}, {"$set": changes})
        logger.info("Donation request %s status -> %s", request_id, changes["donation_status"])
        return update_ack(result)

    async def replace_request(
        self, db: Database, request_id: str, body: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Full-record replacement keyed by id, creating the record if missing.

        The upserted document takes `request_id` as its `_id`.
        """
        oid = parse_object_id(request_id)
        changes = allow_listed_set(body, REPLACEABLE_FIELDS, fill_missing=True)
        with store_errors("replace donation request", request_id=request_id):
            result = await db.donation_requests.update_one(
                {"_id": oid}, {"$set": changes}, upsert=True
            )
        if result.upserted_id is not None:
            logger.info("Donation request %s created by upsert", request_id)
        return update_ack(result)

    async def delete_request(self, db: Database, request_id: str) -> Dict[str, Any]:
        oid = parse_object_id(request_id)
        with store_errors("delete donation request", request_id=request_id):
            result = await db.donation_requests.delete_one({"_id": oid})
        logger.info("Donation request %s deleted (%d)", request_id, result.deleted_count)
        return delete_ack(result)

    async def _find(self, db: Database, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        with store_errors("find donation requests"):
            docs = await db.donation_requests.find(query).to_list()
        return [serialize_document(doc) for doc in docs]


donation_service = DonationService()
