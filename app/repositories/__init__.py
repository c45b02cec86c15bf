"""Repository package — expose all concrete repositories from one import."""
from .catalog_repository import CatalogRepository, DEFAULT_GAMES

__all__ = [
    'CatalogRepository',
    'DEFAULT_GAMES',
]
