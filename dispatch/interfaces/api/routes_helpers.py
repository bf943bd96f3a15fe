"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status


def http_error_from(exc: Exception) -> HTTPException:
    """Translate a use-case exception into the matching HTTP error."""

    if isinstance(exc, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
