import bcrypt

DEFAULT_ROUNDS = 12
MIN_ROUNDS = 10
# bcrypt only considers the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    if not password:
        raise ValueError("Password is required")
    salt = bcrypt.gensalt(rounds=max(MIN_ROUNDS, rounds))
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
