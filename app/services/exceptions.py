class CatalogError(Exception):
    """Base class for errors surfaced to catalog clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None, detail: str = None):
        self.message = message or self.default_message
        self.detail = detail or self.message
        super().__init__(self.message)


class NotFoundError(CatalogError):
    """Exception raised when a requested or scoping entity doesn't exist, or a page is past the end."""

    status_code = 404
    default_message = "Not found"


class BadRequestError(CatalogError):
    """Exception raised for missing or malformed request parameters."""

    status_code = 400
    default_message = "Bad request"


class StorageError(CatalogError):
    """Exception raised when the database fails to answer a read."""

    status_code = 500
    default_message = "An error occurred while reading the catalog"
