from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class QuizMakerError(Exception):
    """Base error raised inside services and the data store"""

    def __init__(self, detail: str, errors: Optional[List[str]] = None):
        super().__init__(detail)
        self.detail = detail
        self.errors = errors or [detail]


class NotFoundError(QuizMakerError):
    pass


class ValidationError(QuizMakerError):
    def __init__(self, errors: List[str]):
        super().__init__(", ".join(errors), errors)


class InvalidCredentialsError(QuizMakerError):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class PermissionDeniedError(QuizMakerError):
    def __init__(self, detail: str = "Admin privileges required"):
        super().__init__(detail)


class PersistenceError(QuizMakerError):
    pass


class ServiceResult(BaseModel, Generic[T]):
    """Outcome of a service call: a success flag plus data or error messages"""

    success: bool
    data: Optional[T] = None
    message: str = ""
    errors: List[str] = []

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error) -> "ServiceResult[T]":
        if isinstance(error, QuizMakerError):
            return cls(success=False, message=error.detail, errors=list(error.errors))
        if isinstance(error, list):
            return cls(success=False, message=", ".join(error), errors=list(error))
        return cls(success=False, message=str(error), errors=[str(error)])
