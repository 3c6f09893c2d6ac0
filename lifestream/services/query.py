"""
LifeStream Backend: Query Shaping and Result Rendering
========================================================

What:  The small set of rules every resource service shares: how query
       parameters become filter documents, how request bodies become `$set`
       documents, and how store results become JSON-ready dicts.
Who:   Used by UserService, DonationService and BlogService.

Filter conventions:
    - A status parameter equal to the literal "all" matches every status.
      Any other supplied value must match exactly. An omitted parameter
      adds no status constraint.
    - Path identifiers are ObjectId hex strings.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from bson import ObjectId

from lifestream.exceptions import InvalidIdentifierError

ALL_STATUSES = "all"


def status_filter(
    field: str,
    value: Optional[str],
    base: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Add an exact-match status constraint to a filter unless `value` is "all".

    >>> status_filter("donation_status", "pending")
    {'donation_status': 'pending'}
    >>> status_filter("donation_status", "all")
    {}
    """
    query = dict(base or {})
    if value is not None and value != ALL_STATUSES:
        query[field] = value
    return query


def donor_search_filter(
    group: Optional[str],
    district: Optional[str],
    upazila: Optional[str],
) -> Dict[str, Any]:
    """
    Filter for the public donor search.

    Always restricted to role "donor". Location and blood group narrow the
    search only when all three are supplied; a partial set returns every donor.
    """
    query: Dict[str, Any] = {"role": "donor"}
    if group and district and upazila:
        query["blood_group"] = group
        query["district"] = district
        query["upazila"] = upazila
    return query


def allow_listed_set(
    body: Mapping[str, Any],
    fields: Iterable[str],
    *,
    fill_missing: bool = False,
) -> Dict[str, Any]:
    """
    Build a `$set` payload from the allow-listed keys of `body`.

    Keys outside `fields` are dropped. With `fill_missing` every allow-listed
    field is written and absent ones become None (full-record replacement);
    otherwise absent fields are left untouched.
    """
    if fill_missing:
        return {field: body.get(field) for field in fields}
    return {field: body[field] for field in fields if field in body}


def parse_object_id(value: str) -> ObjectId:
    """Convert a path identifier to an ObjectId or raise InvalidIdentifierError."""
    if not ObjectId.is_valid(value):
        raise InvalidIdentifierError(value)
    return ObjectId(value)


# ── Result rendering ──────────────────────────────────────────────────────


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Mapping):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def serialize_document(document: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Stored document with every ObjectId rendered as its hex string."""
    if document is None:
        return None
    return serialize_value(document)


def insert_ack(result: Any) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "insertedId": serialize_value(result.inserted_id),
    }


def update_ack(result: Any) -> Dict[str, Any]:
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedCount": 0 if upserted_id is None else 1,
        "upsertedId": serialize_value(upserted_id),
    }


def delete_ack(result: Any) -> Dict[str, Any]:
    return {
        "acknowledged": result.acknowledged,
        "deletedCount": result.deleted_count,
    }
