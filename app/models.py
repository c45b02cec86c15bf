"""Domain types shared by the catalog server and the catalog client."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List


class CatalogDataError(ValueError):
    """Raised when catalog records are malformed or their ids collide."""


@dataclass(frozen=True)
class GameRecord:
    """A single game in the catalog.

    The wire form (see :meth:`to_dict`) uses ``releaseYear``; the Python
    attribute is ``release_year``.
    """

    id: int
    name: str
    developer: str
    platform: str
    release_year: int
    rating: float

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'GameRecord':
        """Build a record from its JSON wire form.

        Raises:
            CatalogDataError: If a field is missing or has the wrong type,
                the id is not positive, or the name is empty.
        """
        try:
            record = cls(
                id=int(raw['id']),
                name=str(raw['name']),
                developer=str(raw.get('developer', '')),
                platform=str(raw.get('platform', '')),
                release_year=int(raw['releaseYear']),
                rating=float(raw['rating']),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogDataError(f"Invalid game record {raw!r}: {exc}") from exc
        if record.id <= 0:
            raise CatalogDataError(f"Game id must be positive, got {record.id}")
        if not record.name.strip():
            raise CatalogDataError(f"Game {record.id} has an empty name")
        return record

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'developer': self.developer,
            'platform': self.platform,
            'releaseYear': self.release_year,
            'rating': self.rating,
        }


def build_envelope(records: Iterable[GameRecord]) -> Dict[str, Any]:
    """Wrap *records* in the ``{success, count, data}`` response envelope."""
    data: List[Dict[str, Any]] = [r.to_dict() for r in records]
    return {'success': True, 'count': len(data), 'data': data}
