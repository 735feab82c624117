# Services package init
"""
Marknote Backend — Services Layer
=================================

Business logic between routes (HTTP) and the database. Every call receives
the caller's id and an AsyncSession; nothing here reads the request.

Service Inventory:
    - NoteService:  owner-scoped list/get/create/update/delete
    - AuthService:  registration, credential checks, session identity lookup
    - passwords:    werkzeug PBKDF2 hashing helpers used by AuthService
"""
