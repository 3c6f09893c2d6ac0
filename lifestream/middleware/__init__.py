"""
LifeStream Backend: Middleware Package
========================================

Application-wide (every request):
    Request → [Request ID] → [Logging] → [CORS] → route

Per-route authorization (FastAPI dependencies, see auth.py):
    route → [verify_token] → [RoleAuthorizer] → handler
"""
