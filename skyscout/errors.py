class SkyscoutError(Exception):
    """Base exception for skyscout errors."""


class ConfigError(SkyscoutError):
    """Raised for invalid configuration values."""


class CatalogError(SkyscoutError):
    """Raised for malformed or inconsistent target and gear catalogs."""


class UnknownTargetError(CatalogError, KeyError):
    """Raised when a target id is not in the catalog."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownSetupError(CatalogError, KeyError):
    """Raised when a setup, camera or optic id cannot be resolved."""

    def __str__(self) -> str:
        return Exception.__str__(self)
