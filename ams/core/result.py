"""Uniform result wrapper returned by every service operation.

Routes branch on ``success`` only; ``kind`` lets the HTTP layer pick a status
code without inspecting exception types.
"""

import enum
import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


@dataclass
class ServiceResult:
    success: bool
    data: Any = None
    message: str = ""
    errors: list[str] = field(default_factory=list)
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "Operation successful") -> "ServiceResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(
        cls,
        message: str,
        kind: ErrorKind = ErrorKind.VALIDATION,
        errors: list[str] | None = None,
    ) -> "ServiceResult":
        return cls(success=False, message=message, errors=list(errors or []), kind=kind)


def service_operation(action: str):
    """Turn anything a service method raises into a failed ``ServiceResult``.

    The decorated method must belong to an object exposing ``uow``; the unit of
    work is rolled back before the failure is returned so the session stays usable.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except IntegrityError as exc:
                self.uow.rollback()
                logger.warning("Constraint violation while %s: %s", action, exc.orig)
                return ServiceResult.fail(
                    f"Could not complete {action}: the record conflicts with existing data",
                    kind=ErrorKind.CONFLICT,
                )
            except Exception as exc:
                self.uow.rollback()
                logger.exception("Unexpected error while %s", action)
                return ServiceResult.fail(
                    f"An error occurred while {action}: {exc}",
                    kind=ErrorKind.UNEXPECTED,
                )

        return wrapper

    return decorator
