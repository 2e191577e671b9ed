"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug probe
hashes a password longer than 72 bytes, which recent bcrypt releases reject.

The cost factor is fixed at 10 rounds. It is a module constant, not a call
argument, so every stored digest in the directory has the same work factor.
"""

from __future__ import annotations

import bcrypt

SALT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of its input.
_MAX_PASSWORD_BYTES = 72


def _encode(plain: str) -> bytes:
    # JSON allows lone surrogate escapes ("\ud800"); strict utf-8 would reject them.
    return plain.encode("utf-8", errors="surrogatepass")[:_MAX_PASSWORD_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt digest of the plaintext password.

    A fresh salt is generated on every call, so hashing the same password
    twice gives two different digests.
    """
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=SALT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt digest."""
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed digest (bad salt / not a bcrypt string)
        return False
