#!/usr/bin/env python3
"""
Catalog Client - terminal front end for the Game Catalog API.
Fetches the game list, optionally filtered by name, and renders it with
loading, error and success states.
"""

import argparse
import enum
import logging
import sys
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import requests
from colorama import init, Fore, Style
from dotenv import load_dotenv

from app.config import ConfigError, load_config, setup_logging
from app.models import CatalogDataError, GameRecord

init(autoreset=True)

ERROR_PREFIX = 'Failed to load game data. Please refresh the page.'
INVALID_RESPONSE = 'Invalid response from server'


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class CatalogClientError(Exception):
    """Base class for every failure of a catalog query."""


class CatalogTransportError(CatalogClientError):
    """The request never produced an HTTP response (DNS, refused, timeout...)."""


class CatalogHTTPError(CatalogClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int):
        super().__init__(f"Failed to load game data. Status: {status_code}")
        self.status_code = status_code


class CatalogResponseError(CatalogClientError):
    """The body was not JSON, its ``success`` flag was not ``true``, or its
    ``data`` was not a list of games.
    """

    def __init__(self, message: str = INVALID_RESPONSE):
        super().__init__(message)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class CatalogAPIClient:
    """Client for the Game Catalog HTTP API"""

    def __init__(self, base_url: str = 'http://localhost:5000', timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self._log = logging.getLogger('catalog.client')

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            self._log.warning("Request to %s failed: %s", url, e)
            raise CatalogTransportError(str(e)) from e

        if not 200 <= response.status_code < 300:
            self._log.warning("GET %s returned HTTP %s", url, response.status_code)
            raise CatalogHTTPError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            self._log.warning("GET %s returned a non-JSON body: %s", url, e)
            raise CatalogResponseError() from e

    def list_games(self, search: Optional[str] = None) -> List[GameRecord]:
        """Return the games whose name matches *search* (all games if empty).

        Raises:
            CatalogTransportError: On any network-level failure.
            CatalogHTTPError: On a non-2xx status.
            CatalogResponseError: If the payload is not a successful envelope.
        """
        params = {'search': search} if search else None
        payload = self._get('/api/games', params=params)
        if not isinstance(payload, dict) or payload.get('success') is not True:
            raise CatalogResponseError()
        data = payload.get('data') or []
        if not isinstance(data, list):
            self._log.warning("Response data is not a list: %r", data)
            raise CatalogResponseError()
        try:
            return [GameRecord.from_dict(item) for item in data]
        except (CatalogDataError, AttributeError, TypeError) as e:
            self._log.warning("Malformed game in response: %s", e)
            raise CatalogResponseError() from e

    def health(self) -> dict:
        """Return the ``/health`` payload."""
        return self._get('/health')


# ---------------------------------------------------------------------------
# View state machine
# ---------------------------------------------------------------------------

class ViewStatus(enum.Enum):
    LOADING = 'loading'
    ERROR = 'error'
    SUCCESS = 'success'


@dataclass(frozen=True)
class ViewState:
    """Snapshot of what the view shows. Exactly one status at a time."""

    status: ViewStatus
    search: str = ''
    games: Tuple[GameRecord, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.status is ViewStatus.SUCCESS and not self.games


def error_message(exc: BaseException) -> str:
    """Return the user-facing message for a failed query."""
    reason = str(exc) or 'Unknown error occurred'
    return f"{ERROR_PREFIX} ({reason})"


class GamesView:
    """Drives one catalog query per search-term change.

    Every query started gets a generation number.  A completion only
    updates the state when its generation is still the latest one, so a
    slow response to an older term can never overwrite a newer result.

    Args:
        client:   Object exposing ``list_games(search)``.
        executor: Runs the fetches; defaults to a private thread pool.
    """

    def __init__(self, client: CatalogAPIClient, executor: Optional[Executor] = None):
        self._client = client
        self._own_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4,
                                                        thread_name_prefix='catalog-view')
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[Future] = None
        self._listeners: List[Callable[[ViewState], None]] = []
        self._state = ViewState(status=ViewStatus.LOADING)
        self._log = logging.getLogger('catalog.view')

    @property
    def state(self) -> ViewState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def subscribe(self, listener: Callable[[ViewState], None]) -> None:
        """Call *listener* with every new state."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_query(self, search: str = '') -> int:
        """Enter Loading for *search* and return the new generation token."""
        with self._lock:
            self._generation += 1
            token = self._generation
            state = self._state = ViewState(status=ViewStatus.LOADING, search=search)
        self._notify(state)
        return token

    def resolve(self, token: int, games: List[GameRecord]) -> bool:
        """Enter Success with *games* if *token* is still current.

        Returns:
            ``True`` if applied; ``False`` if the result was stale.
        """
        return self._finish(token, ViewStatus.SUCCESS, tuple(games), None)

    def reject(self, token: int, exc: BaseException) -> bool:
        """Enter Error for *exc* if *token* is still current."""
        return self._finish(token, ViewStatus.ERROR, (), error_message(exc))

    def _finish(self, token, status, games, error) -> bool:
        with self._lock:
            if token != self._generation:
                self._log.debug("Discarding stale result for generation %d (current %d)",
                                token, self._generation)
                return False
            state = self._state = ViewState(status=status, search=self._state.search,
                                            games=games, error=error)
        self._notify(state)
        return True

    def _notify(self, state: ViewState) -> None:
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def set_search(self, search: str) -> Future:
        """Start a query for *search* on the executor and return its future."""
        token = self.start_query(search)
        future = self._executor.submit(self._fetch, token, search)
        with self._lock:
            self._pending = future
        return future

    def _fetch(self, token: int, search: str) -> None:
        try:
            games = self._client.list_games(search or None)
        except CatalogClientError as e:
            self.reject(token, e)
        else:
            self.resolve(token, games)

    def load(self) -> Future:
        """Initial load: the unfiltered catalog."""
        return self.set_search('')

    def retry(self) -> Future:
        """Re-issue the current search term."""
        return self.set_search(self.state.search)

    def clear_search(self) -> Future:
        return self.set_search('')

    def wait(self, timeout: Optional[float] = None) -> ViewState:
        """Block until the latest query has finished and return the state."""
        with self._lock:
            future = self._pending
        if future is not None:
            future.result(timeout=timeout)
        return self.state

    def close(self) -> None:
        """Invalidate any in-flight query and release the worker threads."""
        with self._lock:
            self._generation += 1
        if self._own_executor:
            self._executor.shutdown(wait=False)


# ---------------------------------------------------------------------------
# Terminal rendering
# ---------------------------------------------------------------------------

def render_state(state: ViewState) -> None:
    """Print *state* to stdout"""
    if state.status is ViewStatus.LOADING:
        print(f"\n{Fore.CYAN}Loading games...")
        print(f"{Fore.WHITE}Please wait while we fetch the data")
        return

    if state.status is ViewStatus.ERROR:
        print(f"\n{Fore.RED}{'='*60}")
        print(f"{Fore.RED}{Style.BRIGHT}⚠️  Error Loading Games")
        print(f"{Fore.RED}{state.error}")
        print(f"{Fore.YELLOW}Type :retry to try again.")
        print(f"{Fore.RED}{'='*60}")
        return

    if not state.games:
        print(f"\n{Fore.YELLOW}No games found matching your search.")
        print(f"{Fore.WHITE}Type :clear to clear the search.")
        return

    print(f"\n{Fore.GREEN}Found {len(state.games)} game(s)")
    for game in state.games:
        print(f"\n{Fore.GREEN}{'='*60}")
        print(f"{Fore.CYAN}{Style.BRIGHT}🎮 {game.name}")
        print(f"{Fore.YELLOW}Developer: {Fore.WHITE}{game.developer}")
        print(f"{Fore.YELLOW}Platform: {Fore.WHITE}{game.platform}")
        print(f"{Fore.YELLOW}Release Year: {Fore.WHITE}{game.release_year}")
        print(f"{Fore.YELLOW}Rating: {Fore.WHITE}{game.rating}/10")
    print(f"{Fore.GREEN}{'='*60}")


def interactive_mode(view: GamesView) -> None:
    """Prompt for search terms until the user quits"""
    view.load()
    view.wait()

    while True:
        print(f"\n{Fore.CYAN}{Style.BRIGHT}Game Catalog")
        print(f"{Fore.WHITE}Enter a search term, :clear, :retry or :quit")
        try:
            entry = input(f"{Fore.GREEN}Search: {Fore.WHITE}")
        except EOFError:
            break

        command = entry.strip().lower()
        if command in (':quit', ':q'):
            break
        elif command == ':clear':
            view.clear_search()
        elif command == ':retry':
            view.retry()
        else:
            view.set_search(entry)
        view.wait()

    print(f"\n{Fore.CYAN}Thanks for browsing! Happy gaming! 🎮")


def main():
    """Main entry point"""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description='Game Catalog terminal client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  catalog-client                     # Interactive search
  catalog-client --search zelda      # Print matching games and exit
  catalog-client --health            # Check that the API is up
        """
    )
    parser.add_argument('--config', '-c', default=None,
                        help='Path to config file (default: catalog_config.json if present)')
    parser.add_argument('--url', help='Catalog API base URL (default: http://localhost:5000)')
    parser.add_argument('--search', '-s', help='Search once for this term and exit')
    parser.add_argument('--timeout', type=float, help='Request timeout in seconds (default: 10)')
    parser.add_argument('--health', action='store_true', help='Print the API health status and exit')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING, ERROR or CRITICAL')
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        sys.exit(1)

    setup_logging(args.log_level or config['log_level'])
    client = CatalogAPIClient(args.url or config['api_url'],
                              timeout=args.timeout if args.timeout is not None else config['timeout'])

    if args.health:
        try:
            status = client.health()
        except CatalogClientError as e:
            print(f"{Fore.RED}{e}")
            sys.exit(1)
        print(f"{Fore.GREEN}{status.get('status', status)}")
        return

    view = GamesView(client)
    view.subscribe(render_state)
    try:
        if args.search is not None:
            view.set_search(args.search)
            state = view.wait()
            if state.status is ViewStatus.ERROR:
                sys.exit(1)
        else:
            interactive_mode(view)
    except KeyboardInterrupt:
        print(f"\n{Fore.CYAN}Bye!")
    finally:
        view.close()


if __name__ == "__main__":
    main()
