import re
from typing import Optional

from passlib.context import CryptContext

from quizmaker.errors import PermissionDeniedError
from quizmaker.models import ADMIN_ROLE, User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised hash format
        return False


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email.strip()) is not None


def is_in_role(user: Optional[User], role: str) -> bool:
    """Case-insensitive check of the user's single role tag"""
    if user is None or not user.role or not role:
        return False
    return user.role.lower() == role.lower()


def is_admin_user(user: Optional[User]) -> bool:
    return is_in_role(user, ADMIN_ROLE)


def require_admin(user: Optional[User]) -> User:
    """Require admin privileges"""
    if not is_admin_user(user):
        raise PermissionDeniedError()
    return user
