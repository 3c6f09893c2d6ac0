"""
LifeStream Backend
===================

REST backend for a blood-donation coordination platform: donor/user records,
donation requests and blog posts in MongoDB, behind JWT authentication with
donor, volunteer and admin roles.

Layers:
    routes/      HTTP concerns only (paths, auth chain, query/body extraction)
    middleware/  request id, access logging, authorization chain
    services/    one store operation per method, shared query shaping
    database.py  process-scoped Mongo client
"""

__version__ = "1.0.0"
