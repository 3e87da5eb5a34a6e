"""
Employee Manager API — Application Package Initializer
======================================================

What: Marks the `employee_api` directory as a Python package.
Why:  Enables module imports like `from employee_api.config import Settings`.
Who:  Used by uvicorn, pytest, and the `python -m employee_api` entry point.

Architecture Note:
    The service is a thin layered CRUD wrapper:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Storage Accessor)     │  ← SQL statements, error mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes validate and shape requests/responses; the service layer is the
    only code that touches the `employees` table.
"""

__version__ = "1.0.0"
