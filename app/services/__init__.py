"""Services package — expose all concrete services from one import."""
from .catalog_service import CatalogService

__all__ = [
    'CatalogService',
]
