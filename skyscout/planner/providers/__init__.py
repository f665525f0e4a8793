from .base import CatalogProvider
from .catalog import BuiltinCatalogProvider, CsvCatalogProvider


def get_catalog_providers(extra_path=None, include_builtin: bool = True):
    providers: list[CatalogProvider] = []
    if include_builtin:
        providers.append(BuiltinCatalogProvider())
    if extra_path is not None:
        providers.append(CsvCatalogProvider(catalog_path=extra_path))
    return providers

__all__ = [
    "CatalogProvider",
    "BuiltinCatalogProvider",
    "CsvCatalogProvider",
    "get_catalog_providers",
]
