"""
Live catalog client for PokeAPI
Implements the search repository contract with retries and a shared cache
"""
import logging
import re
import threading
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv
from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from dexsearch.cache import CacheManager
from dexsearch.schemas import CreatureRecord
from dexsearch.search.models.candidates import NameEntry
from dexsearch.search.repository import (
    CatalogRepository,
    RecordNotFound,
    TransportError,
)
from config.settings import settings

load_dotenv()

logger = logging.getLogger("api_client")

# Resource URLs end in the numeric id: https://pokeapi.co/api/v2/pokemon/25/
_ID_FROM_URL = re.compile(r"/(\d+)/?$")


def parse_resource_id(url: str) -> Optional[int]:
    """Extract the trailing numeric id from a PokeAPI resource URL."""
    match = _ID_FROM_URL.search(url or "")
    return int(match.group(1)) if match else None


def _entries_from_refs(refs: List[Dict[str, Any]]) -> List[NameEntry]:
    entries = []
    for ref in refs:
        resource_id = parse_resource_id(ref.get("url", ""))
        if resource_id is None:
            logger.warning(f"Skipping listing entry without id: {ref}")
            continue
        entries.append(NameEntry(id=resource_id, name=ref.get("name", "")))
    return entries


class PokeApiClient(CatalogRepository):
    """
    CatalogRepository over the public PokeAPI.

    - GETs share one requests.Session
    - a semaphore caps concurrent outbound requests
    - transport failures (connection errors, timeouts, 5xx, bad JSON) are
      retried with exponential backoff; 404 is not
    - responses are cached per endpoint with concurrent lookups coalesced
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[CacheManager] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        max_concurrent_requests: Optional[int] = None,
        use_cache: Optional[bool] = None,
    ):
        self.base_url = (base_url or settings.pokeapi_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.cache = cache or CacheManager()
        self.timeout = timeout or settings.http_timeout_seconds
        self.retry_attempts = retry_attempts or settings.retry_attempts
        self.retry_backoff = (
            settings.retry_backoff_seconds if retry_backoff is None else retry_backoff
        )
        self.use_cache = settings.cache_enabled if use_cache is None else use_cache
        self._semaphore = threading.Semaphore(
            max_concurrent_requests or settings.max_concurrent_requests
        )

    # ------------------------------------------------------------------
    # Repository contract
    # ------------------------------------------------------------------

    def list_names(self, limit: int, offset: int = 0) -> List[NameEntry]:
        data = self._get("pokemon", {"limit": limit, "offset": offset})
        return _entries_from_refs(data.get("results") or [])

    def fetch_by_id(self, record_id: int) -> CreatureRecord:
        data = self._get(f"pokemon/{record_id}")
        try:
            return CreatureRecord.from_api(data)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed record {record_id}: {e}") from e

    def list_by_type(self, type_id: str) -> List[NameEntry]:
        data = self._get(f"type/{type_id.lower()}")
        refs = [slot.get("pokemon") or {} for slot in data.get("pokemon") or []]
        return _entries_from_refs(refs)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> int:
        return self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_stats()

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = params or {}
        cache_key = _cache_key(endpoint, params)

        def fetch() -> Dict[str, Any]:
            return self._request_with_retry(endpoint, params)

        if not self.use_cache:
            return fetch()
        return self.cache.get(cache_key, fetch, endpoint)

    def _request_with_retry(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, min=0, max=10),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info(
                        f"Retrying {endpoint} (attempt {attempt.retry_state.attempt_number})"
                    )
                return self._request(endpoint, params)

    def _request(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"

        with self._semaphore:
            try:
                response = self.session.get(url, params=params or None, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning(f"PokeAPI request failed: {url} - {e}")
                raise TransportError(str(e)) from e

        if response.status_code == 404:
            raise RecordNotFound(f"Not found: {endpoint}")
        if response.status_code >= 500:
            raise TransportError(f"HTTP {response.status_code} from {endpoint}")

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {endpoint}: {e}") from e


def _cache_key(endpoint: str, params: dict) -> str:
    """Generate cache key from endpoint and params."""
    sorted_params = sorted((k, v) for k, v in params.items() if v is not None)
    return f"{endpoint}:{sorted_params}"
