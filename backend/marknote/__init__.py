"""
Marknote Backend — Application Package Initializer
==================================================

What: Personal markdown notes served over a session-authenticated REST API,
      plus a Python client that keeps a local snapshot of the notes in sync.

Architecture Note:

    ┌─────────────────────────────────────┐
    │        Client (sync controller)     │  ← httpx + explicit client state
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, filtering, CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
