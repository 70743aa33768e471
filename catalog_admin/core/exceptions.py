"""Custom exception classes for the catalog admin backend."""

from fastapi import status


class CatalogAdminError(Exception):
    """Base exception for Catalog Admin."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(CatalogAdminError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(CatalogAdminError):
    """Raised when the actor lacks authority for a user, role or page."""
    status_code = status.HTTP_403_FORBIDDEN


class OutOfScopeError(ForbiddenError):
    """Raised when a resource's company is outside the actor's scope."""
    pass


class ResourceNotFoundError(CatalogAdminError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(CatalogAdminError):
    """Raised when a resource already exists or is still referenced."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(CatalogAdminError):
    """Raised when input validation fails."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InvalidPageReferenceError(ValidationError):
    """Raised when a page path is not in the page registry."""

    def __init__(self, paths):
        self.paths = sorted(paths)
        super().__init__(f"Unknown page path(s): {', '.join(self.paths)}")
