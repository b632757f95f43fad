"""
Password hashing and verification.

bcrypt is CPU bound; callers are sync route handlers, which FastAPI runs in
its threadpool, so the event loop keeps serving other requests meanwhile.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = 10) -> str:
    """Hash a password using bcrypt directly."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    hashed_bytes = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
