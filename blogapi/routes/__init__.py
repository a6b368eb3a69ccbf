# Routes package init
"""
Blog API — API Routes Package
===============================

Route Inventory:
    - blogs.py:   /blogs CRUD endpoints
    - health.py:  GET /health (service health check)

Routes stay thin: read the request, call validation and the service,
return the response model. Business rules live in `blogapi.services`.
"""
