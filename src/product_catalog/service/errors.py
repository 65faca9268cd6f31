"""Failure taxonomy for catalog persistence and request handling."""


class CatalogError(Exception):
    """Base class for every catalog failure surfaced to the HTTP layer."""


class StoreUnavailable(CatalogError):
    """The key-value store is not configured or could not be reached."""


class StoreWriteFailed(CatalogError):
    """Overwriting the catalog value failed."""


class SeedFailure(CatalogError):
    """The seed file is missing, unreadable or malformed."""


class DeleteFailed(CatalogError):
    """A delete-by-ids cycle failed while reading or writing the catalog."""


class CatalogValidationError(CatalogError):
    """A request payload is missing required fields."""


class Unauthorized(CatalogError):
    """The access gate rejected a mutating request."""
