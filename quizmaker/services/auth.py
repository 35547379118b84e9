import logging
from typing import List

from pydantic import BaseModel

from quizmaker.config import settings
from quizmaker.database import DataStore
from quizmaker.errors import (
    InvalidCredentialsError, QuizMakerError, ServiceResult, ValidationError,
)
from quizmaker.models import USER_ROLE, User
from quizmaker.utils.auth_utils import (
    hash_password, is_in_role, is_valid_email, verify_password,
)

# Request models
class RegisterRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    def validate_fields(self) -> List[str]:
        errors = []
        if not self.first_name.strip():
            errors.append("First name is required")
        if not self.last_name.strip():
            errors.append("Last name is required")
        if not self.email.strip():
            errors.append("Email is required")
        if not self.password.strip():
            errors.append("Password is required")

        if self.email.strip() and not is_valid_email(self.email):
            errors.append("Please enter a valid email address")

        if self.password.strip():
            if len(self.password) < settings.min_password_length:
                errors.append(f"Password must be at least {settings.min_password_length} characters long")
            if not any(ch.isdigit() for ch in self.password):
                errors.append("Password must contain at least one number")
            if not any(ch.isalpha() for ch in self.password):
                errors.append("Password must contain at least one letter")

        if self.password != self.confirm_password:
            errors.append("Passwords do not match")
        return errors

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

    def validate_fields(self) -> List[str]:
        errors = []
        if not self.email.strip():
            errors.append("Email is required")
        if not self.password.strip():
            errors.append("Password is required")
        if self.email.strip() and not is_valid_email(self.email):
            errors.append("Please enter a valid email address")
        return errors


class AuthService:
    def __init__(self, store: DataStore):
        self.store = store

    def login(self, email: str, password: str) -> ServiceResult:
        """Check credentials; unknown email and wrong password fail the same way"""
        try:
            errors = LoginRequest(email=email or "", password=password or "").validate_fields()
            if errors:
                raise ValidationError(errors)

            user = self.store.find_user_by_email(email)
            if user is None or not verify_password(password, user.password_hash):
                raise InvalidCredentialsError()

            logging.info(f"User {user.id} logged in")
            return ServiceResult.ok(user)
        except InvalidCredentialsError as e:
            logging.warning(f"Failed login for {email}")
            return ServiceResult.failure(e)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def register(self, request: RegisterRequest) -> ServiceResult:
        """Validate the request and create a new account with the default role"""
        try:
            errors = request.validate_fields()
            if errors:
                raise ValidationError(errors)

            if self.store.find_user_by_email(request.email) is not None:
                raise QuizMakerError("Email address is already registered")

            user = User(
                email=request.email.strip().lower(),
                password_hash=hash_password(request.password),
                first_name=request.first_name.strip(),
                last_name=request.last_name.strip(),
                role=USER_ROLE,
            )
            self.store.insert("users", user)
            self.store.commit()
            logging.info(f"Registered user {user.id} ({user.email})")
            return ServiceResult.ok(user)
        except QuizMakerError as e:
            return ServiceResult.failure(e)

    def is_in_role(self, user: User, role: str) -> bool:
        return is_in_role(user, role)
