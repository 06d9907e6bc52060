# Services package init
"""
Layerpost Backend — Services Layer
===================================

Business logic between controllers (HTTP) and repositories (persistence).

Service Inventory:
    - PostService: validate, store and fetch posts; returns ServiceResult
    - ServiceResult: success/error tagged outcome shared by all services

Services take plain data and ids, never transport objects, and never raise
past their own boundary.
"""
