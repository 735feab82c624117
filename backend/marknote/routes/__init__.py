# Routes package init
"""
Marknote Backend — API Routes Package
=====================================

Route Inventory:
    - auth.py:    /api/auth/register, /login, /me, /logout
    - notes.py:   /api/notes, /api/notes/{id}  (session required)
    - health.py:  GET /health

Routes stay thin: read the request, resolve the caller, call a service,
wrap the result in an envelope. Ownership and filtering live in services.
"""
