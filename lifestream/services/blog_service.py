"""
LifeStream Backend: Blog Service
==================================

What:  Store operations behind /blogs. Creation and reads are public;
       status changes and deletes are admin-only at the route level.
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


class BlogService:

    async def create_blog(self, db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
        with store_errors("insert blog"):
            result = await db.blogs.insert_one(data)
        logger.info("Blog created: %s", result.inserted_id)
        return insert_ack(result)

    async def list_blogs(self, db: Database, blog_status: Optional[str]) -> List[Dict[str, Any]]:
        query = status_filter("blog_status", blog_status)
        with store_errors("list blogs", blog_status=blog_status):
            blogs = await db.blogs.find(query).to_list()
        return [serialize_document(blog) for blog in blogs]

    async def get_blog(self, db: Database, blog_id: str) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(blog_id)
        with store_errors("get blog", blog_id=blog_id):
            blog = await db.blogs.find_one({"_id": oid})
        return serialize_document(blog)

    async def update_status(
        self, db: Database, blog_id: str, body: Mapping[str, Any]
    ) -> Dict[str, Any]:
        changes = allow_listed_set(body, ("blog_status",), fill_missing=True)
        oid = parse_object_id(blog_id)
        with store_errors("update blog status", blog_id=blog_id):
            result = await db.blogs.update_one({"_id": oid}, {"$set": changes})
        logger.info("Blog %s status -> %s", blog_id, changes["blog_status"])
        return update_ack(result)

    async def delete_blog(self, db: Database, blog_id: str) -> Dict[str, Any]:
        oid = parse_object_id(blog_id)
        with store_errors("delete blog", blog_id=blog_id):
            result = await db.blogs.delete_one({"_id": oid})
        logger.info("Blog %s deleted (%d)", blog_id, result.deleted_count)
        return delete_ack(result)


blog_service = BlogService()
