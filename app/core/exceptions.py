"""Custom HTTP exceptions for the content API."""

from fastapi import HTTPException, status


class PostNotFoundException(HTTPException):
    """Exception when a post does not exist (or is not visible on the public path)."""

    def __init__(self, detail: str = "Post not found."):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class InvalidQueryException(HTTPException):
    """Exception for malformed filter, sort or pagination input."""

    def __init__(self, detail: str = "Invalid query parameters."):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class InvalidCredentialsException(HTTPException):
    """Exception when the bearer token is missing or fails validation."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminRequiredException(HTTPException):
    """Exception when a non-admin calls an admin route."""

    def __init__(self, detail: str = "Not enough permissions. Admin role required."):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


__all__ = [
    "PostNotFoundException",
    "InvalidQueryException",
    "InvalidCredentialsException",
    "AdminRequiredException",
]
