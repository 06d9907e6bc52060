# Routes package init
"""
Layerpost Backend — API Routes Package
=======================================

Route Inventory:
    - posts.py:   /api/posts CRUD (controller-backed)
    - health.py:  GET /health (database probe)
    - pages.py:   GET / (index page, VIEW_ENGINE=html only)

Routes stay thin: they declare paths, query/path parameters and docs, then
hand plain data to a controller. Status mapping lives in the controller and
business rules in the services.
"""
