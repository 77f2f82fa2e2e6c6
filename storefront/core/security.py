# storefront/core/security.py
import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a plaintext password with a fresh bcrypt salt.

    Args:
        password: plaintext password.
        rounds: bcrypt cost factor (log2 of iterations, 4..31).

    Returns:
        The bcrypt hash as a str ("$2b$<rounds>$...").
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Compare a plaintext password against a stored hash.

    bcrypt.checkpw compares in constant time. A malformed stored hash
    counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
