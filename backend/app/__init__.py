"""
Layerpost Backend — Application Package Initializer
===================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by the `layerpost` console script, uvicorn, and pytest.

Architecture Note:
    The backend is split into three request-handling layers plus the
    startup machinery that wires them together:

    ┌─────────────────────────────────────┐
    │     Controllers + Routes (HTTP)     │  ← plain-data payload in, status + body out
    ├─────────────────────────────────────┤
    │       Services (Business Logic)     │  ← tagged ServiceResult, never raises
    ├─────────────────────────────────────┤
    │     Repositories (Data Access)      │  ← generic CRUD over an ORM model
    ├─────────────────────────────────────┤
    │      Database (Async SQLAlchemy)    │  ← one engine, one session per request
    └─────────────────────────────────────┘

    Startup:
        Settings → Bootstrapper (connect DB) → HTTP loader (pipeline) → uvicorn
"""

__version__ = "1.0.0"
