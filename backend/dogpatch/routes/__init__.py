# Routes package init
"""
DogPatch Backend - API Routes Package
======================================

Route Inventory:
    - users.py:   /api/v1/users ...          (accounts, login, seller reviews)
    - dogs.py:    /api/v1/dogs ...           (listings and listing images)
    - files.py:   GET /files/{path}          (stored images)
    - health.py:  GET /health                (service health check)

Routes stay thin: they extract request data, call a service, and let
response_model shape the output. Business logic lives in services.
"""
