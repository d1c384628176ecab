"""bcrypt password hashing.

The cost factor is stored inside each hash, so raising ``ROUNDS`` only
affects new hashes. bcrypt reads at most 72 bytes of a password; longer ones
are refused rather than silently truncated.
"""

import bcrypt

ROUNDS = 12
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = ROUNDS) -> str:
    if password_too_long(password):
        raise ValueError(f"Passwords are limited to {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, encoded: str) -> bool:
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), encoded.encode("ascii"))
    except ValueError:
        # Not a bcrypt hash
        return False
