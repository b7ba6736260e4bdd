"""
MailChimp Sync Backend — Application Package Initializer
==========================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (app.main:app), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (write-through sync)      │  ← Validate → MailChimp → store
    ├──────────────────┬──────────────────┤
    │  Repositories    │  RemoteClient    │  ← Local rows / MailChimp API
    ├──────────────────┴──────────────────┤
    │   Models (SQLAlchemy) & Schemas     │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
