from typing import Any

from fastapi import HTTPException, status

from ams.core.result import ErrorKind, ServiceResult

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_result(result: ServiceResult) -> Any:
    """Return the payload of a successful result, raise HTTPException otherwise."""
    if result.success:
        return result.data

    status_code = STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise HTTPException(
        status_code=status_code,
        detail={'message': result.message, 'errors': result.errors},
    )


def message_response(result: ServiceResult) -> dict:
    raise_for_result(result)
    return {'message': result.message}
