"""
Marknote Backend — Password Hashing
===================================

What:  Salted PBKDF2-SHA256 hashing and constant-time verification.
How:   werkzeug.security; the method string carries the iteration count, so
       it can be raised later without invalidating existing accounts.

Stored format:
    pbkdf2:sha256:<iterations>$<salt>$<digest hex>
"""

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from marknote.config import settings


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Return a self-describing hash string for `password`."""
    rounds = iterations or settings.password_hash_iterations
    return generate_password_hash(password, method=f"pbkdf2:sha256:{rounds}")


def verify_password(password: str, stored: str) -> bool:
    """
    Check `password` against a hash produced by hash_password().

    Malformed or foreign-format hashes never verify.
    """
    try:
        return check_password_hash(stored, password)
    except ValueError:
        # Unknown method or non-numeric iteration count
        return False
