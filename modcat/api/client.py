"""
Async client for the read-only mod catalog REST API.
"""

import json
import logging
import time
from typing import Any

import aiohttp
from pydantic import ValidationError

from modcat.exceptions import ParseFailure, RemoteNotFound, RemoteUnavailable
from modcat.models.config import DEFAULT_CATALOG_URL, DEFAULT_USER_AGENT
from modcat.models.mod import FileRecord, ModRecord

log = logging.getLogger(__name__)


class CatalogClient:
    """
    Client for the catalog's `addon` endpoints.

    Every call is a single attempt: there is no retry, backoff or rate
    limiting, and any failure is raised to the caller.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_CATALOG_URL,
        game_id: int = 432,
        section_id: int = 6,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = 0,
        session: aiohttp.ClientSession | None = None,
    ):
        """
        Initializes the catalog client.

        Args:
            base_url: Root of the versioned API, e.g. `.../api/v3/direct/`.
            game_id: Catalog id of the target game, used by search.
            section_id: Catalog section (mods, resource packs, ...) used by search.
            user_agent: Identifying client header sent with every request.
            timeout_seconds: Total request timeout; 0 disables it.
            session: An existing session to use instead of creating one.
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.game_id = game_id
        self.section_id = section_id
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config) -> "CatalogClient":
        return cls(
            base_url=config.catalog_url,
            game_id=config.game_id,
            section_id=config.section_id,
            user_agent=config.user_agent,
            timeout_seconds=config.timeout_seconds,
        )

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds or None),
            )
            self._owns_session = True

    async def close(self) -> None:
        """Gracefully closes the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def api_call(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """
        Performs a GET against an endpoint and returns the decoded JSON body.

        Raises:
            RemoteNotFound: The catalog answered 404.
            RemoteUnavailable: Transport failure or any other non-2xx status.
            ParseFailure: The body is not valid JSON.
        """
        await self._initialize_session()
        url = self.base_url + endpoint
        start_time = time.monotonic()

        try:
            async with self._session.get(url, params=params) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"GET {endpoint} -> {r.status} ({duration_ms:.0f} ms)")

                if r.status == 404:
                    raise RemoteNotFound(f"Catalog has no entry at '{endpoint}'.")
                if not 200 <= r.status < 300:
                    raise RemoteUnavailable(
                        f"Catalog request '{endpoint}' failed with HTTP {r.status}."
                    )
                body = await r.text()
        except (aiohttp.ClientError, TimeoutError) as e:
            log.debug(f"API call to {endpoint} failed: {e}")
            raise RemoteUnavailable(
                f"Catalog request '{endpoint}' failed: {e}"
            ) from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise ParseFailure(
                f"Catalog response for '{endpoint}' is not valid JSON: {e}"
            ) from e

    # Public API Methods
    async def fetch_by_id(self, mod_id: int) -> ModRecord:
        data = await self.api_call(f"addon/{mod_id}")
        return _parse(ModRecord, data, f"addon/{mod_id}")

    async def fetch_file_detail(self, mod_id: int, file_id: int) -> FileRecord:
        endpoint = f"addon/{mod_id}/file/{file_id}"
        data = await self.api_call(endpoint)
        return _parse(FileRecord, data, endpoint)

    async def search(self, query: str) -> list[ModRecord]:
        data = await self.api_call(
            "addon/search",
            params={
                "gameId": self.game_id,
                "sectionId": self.section_id,
                "searchFilter": query,
            },
        )
        if not isinstance(data, list):
            raise ParseFailure("Catalog search response must be a JSON list.")
        return [_parse(ModRecord, item, "addon/search") for item in data]


def _parse(model, data: Any, endpoint: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ParseFailure(
            f"Unexpected {model.__name__} payload from '{endpoint}':\n{e}"
        ) from e
