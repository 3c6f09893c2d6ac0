"""
LifeStream Backend: API Routes Package
========================================

Route Inventory:
    - auth.py:       POST /jwt
    - users.py:      /users, /user, /all-users
    - donations.py:  /donations, /all-donations, /all-pending
    - blogs.py:      /blogs
    - health.py:     GET /  and  GET /health

Routes stay thin: read path/query/body, pick the auth chain, call one
service method, return its result.
"""
