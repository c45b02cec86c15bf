"""Repository for the fixed game catalog."""
import json
from typing import Dict, List, Optional, Tuple

from ..models import CatalogDataError, GameRecord
from .base import BaseRepository

DEFAULT_GAMES: List[Dict] = [
    {
        'id': 1,
        'name': 'The Legend of Zelda: Breath of the Wild',
        'developer': 'Nintendo',
        'platform': 'Nintendo Switch',
        'releaseYear': 2017,
        'rating': 9.3,
    },
    {
        'id': 2,
        'name': 'Elden Ring',
        'developer': 'FromSoftware',
        'platform': 'Multi-platform',
        'releaseYear': 2022,
        'rating': 9.1,
    },
    {
        'id': 3,
        'name': 'The Witcher 3: Wild Hunt',
        'developer': 'CD Projekt Red',
        'platform': 'Multi-platform',
        'releaseYear': 2015,
        'rating': 9.2,
    },
    {
        'id': 4,
        'name': 'Cyberpunk 2077',
        'developer': 'CD Projekt Red',
        'platform': 'Multi-platform',
        'releaseYear': 2020,
        'rating': 7.7,
    },
    {
        'id': 5,
        'name': 'Hades',
        'developer': 'Supergiant Games',
        'platform': 'Multi-platform',
        'releaseYear': 2020,
        'rating': 9.0,
    },
    {
        'id': 6,
        'name': 'Hollow Knight',
        'developer': 'Team Cherry',
        'platform': 'Multi-platform',
        'releaseYear': 2017,
        'rating': 8.7,
    },
]


class CatalogRepository(BaseRepository):
    """Holds the immutable game catalog for the lifetime of the process.

    The records come from *file_path* when given, otherwise from
    :data:`DEFAULT_GAMES`.  Schema of the optional file::

        [ {"id": 1, "name": "...", "developer": "...", "platform": "...",
           "releaseYear": 2017, "rating": 9.3}, ... ]

    Raises:
        CatalogDataError: If the file cannot be read, is not a JSON list,
            holds an invalid record, or two records share an id.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        super().__init__(file_path)
        if file_path:
            try:
                raw = self._load()
            except (json.JSONDecodeError, IOError) as exc:
                raise CatalogDataError(f"Could not load catalog {file_path}: {exc}") from exc
        else:
            raw = DEFAULT_GAMES
        self.data: Tuple[GameRecord, ...] = self._build(raw)
        self._log.debug("Catalog ready with %d game(s)", len(self.data))

    @staticmethod
    def _build(raw) -> Tuple[GameRecord, ...]:
        if not isinstance(raw, list):
            raise CatalogDataError("Catalog data must be a JSON list of games")
        records = tuple(GameRecord.from_dict(item) for item in raw)
        seen = set()
        for record in records:
            if record.id in seen:
                raise CatalogDataError(f"Duplicate game id {record.id}")
            seen.add(record.id)
        return records

    def all(self) -> Tuple[GameRecord, ...]:
        """Return every record in definition order."""
        return self.data
