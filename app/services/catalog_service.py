"""Business logic for querying the game catalog."""
import logging
from typing import Any, Dict, List, Optional

from ..models import GameRecord, build_envelope
from ..repositories.catalog_repository import CatalogRepository

HEALTH_STATUS = {'status': 'API is running'}


class CatalogService:
    """Answers catalog queries, delegating storage to
    :class:`~app.repositories.catalog_repository.CatalogRepository`.

    Rules
    -----
    * A missing query, or one that is blank after stripping, matches every game.
    * Otherwise a game matches when its case-folded name contains the
      case-folded query as a substring.
    * Results keep catalog order and the call never fails.
    """

    def __init__(self, repository: CatalogRepository) -> None:
        self._repo = repository
        self._log = logging.getLogger('catalog.service')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def search(self, query: Optional[str] = None) -> List[GameRecord]:
        """Return the games whose name contains *query*, ignoring case."""
        games = self._repo.all()
        if query is None or not query.strip():
            return list(games)
        needle = query.casefold()
        return [g for g in games if needle in g.name.casefold()]

    def list_games(self, query: Optional[str] = None) -> Dict[str, Any]:
        """Return the ``{success, count, data}`` envelope for *query*."""
        matches = self.search(query)
        self._log.debug("search=%r matched %d game(s)", query, len(matches))
        return build_envelope(matches)

    def health_check(self) -> Dict[str, str]:
        return dict(HEALTH_STATUS)
