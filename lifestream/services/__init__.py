"""
LifeStream Backend: Services Layer
====================================

Service Inventory:
    - query.py:             shared filter/update builders and result rendering
    - token_service.py:     access token issue/verify (PyJWT)
    - user_service.py:      users collection
    - donation_service.py:  donationRequests collection
    - blog_service.py:      blogs collection
"""
