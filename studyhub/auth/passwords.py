"""Password hashing for StudyHub accounts."""

from werkzeug.security import generate_password_hash, check_password_hash

from studyhub.models.constants import MIN_PASSWORD_LENGTH


def validate_password(password: str) -> None:
    """Raise ValueError if the password does not meet the minimum policy."""
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    return check_password_hash(password_hash, password)
