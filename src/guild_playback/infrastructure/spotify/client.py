"""Spotify Web API client that turns catalog links into YouTube search queries."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from typing import Any, Final, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from guild_playback.application.interfaces.spotify_catalog import SpotifyCatalog
from guild_playback.config.settings import SpotifySettings
from guild_playback.domain.music.links import spotify_id
from guild_playback.domain.music.value_objects import LinkKind
from guild_playback.domain.shared.exceptions import SpotifyLookupError
from guild_playback.domain.shared.messages import ErrorMessages, LogTemplates
from guild_playback.infrastructure.spotify.models import (
    SpotifyPage,
    SpotifyPlaylistItem,
    SpotifyToken,
    SpotifyTrackItem,
)

logger = logging.getLogger(__name__)

API_BASE: Final[str] = "https://api.spotify.com/v1"
TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
TOKEN_EXPIRY_MARGIN: Final[int] = 60

ModelT = TypeVar("ModelT", bound=BaseModel)


class SpotifyClient(SpotifyCatalog):
    """Reads tracks, albums and playlists with the client-credentials flow.

    The access token is cached until shortly before it expires. Album and
    playlist listings follow the ``next`` link until every page is read.
    """

    def __init__(
        self,
        settings: SpotifySettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or SpotifySettings()
        self._client = http_client
        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout_s)
        return self._client

    # ── Auth ───────────────────────────────────────────────────────────

    async def _access_token(self) -> str:
        if not self._settings.is_configured:
            raise SpotifyLookupError(ErrorMessages.SPOTIFY_CREDENTIALS_MISSING)

        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            response = await self._send(
                "POST",
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(
                    self._settings.client_id,
                    self._settings.client_secret.get_secret_value(),
                ),
            )
            token = _parse(SpotifyToken, _decode(response, TOKEN_URL), TOKEN_URL)
            self._token = token.access_token
            self._token_expires_at = time.monotonic() + max(token.expires_in - TOKEN_EXPIRY_MARGIN, 0)
            logger.debug(LogTemplates.SPOTIFY_TOKEN_REFRESHED, token.expires_in)
            return self._token

    def _invalidate_token(self) -> None:
        self._token = None
        self._token_expires_at = 0.0

    # ── HTTP ───────────────────────────────────────────────────────────

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._get_client().request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise SpotifyLookupError(
                ErrorMessages.SPOTIFY_REQUEST_FAILED.format(status=e.__class__.__name__, path=url)
            ) from e

        if response.is_error:
            raise SpotifyLookupError(
                ErrorMessages.SPOTIFY_REQUEST_FAILED.format(status=response.status_code, path=url),
                status_code=response.status_code,
            )
        return response

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        token = await self._access_token()
        try:
            response = await self._send(
                "GET", url, params=params, headers={"Authorization": f"Bearer {token}"}
            )
        except SpotifyLookupError as e:
            if e.status_code == 401:
                self._invalidate_token()
            raise
        return _decode(response, url)

    async def _paginate(self, url: str, params: dict[str, Any]) -> AsyncIterator[dict[str, Any]]:
        next_url: str | None = url
        next_params: dict[str, Any] | None = params
        while next_url:
            page = _parse(SpotifyPage, await self._get(next_url, next_params), next_url)
            for item in page.items:
                yield item
            # The ``next`` link already carries offset, limit and market.
            next_url, next_params = page.next, None

    def _page_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": self._settings.page_size}
        if self._settings.market:
            params["market"] = self._settings.market
        return params

    # ── Catalog ────────────────────────────────────────────────────────

    async def track_query(self, track_id: str) -> str:
        params = {"market": self._settings.market} if self._settings.market else None
        url = f"{API_BASE}/tracks/{track_id}"
        track = _parse(SpotifyTrackItem, await self._get(url, params), url)
        return track.query

    async def album_queries(self, album_id: str) -> list[str]:
        queries: list[str] = []
        url = f"{API_BASE}/albums/{album_id}/tracks"
        async for raw in self._paginate(url, self._page_params()):
            track = _parse(SpotifyTrackItem, raw, url)
            if track.is_searchable:
                queries.append(track.query)
        return queries

    async def playlist_queries(self, playlist_id: str) -> list[str]:
        queries: list[str] = []
        url = f"{API_BASE}/playlists/{playlist_id}/tracks"
        async for raw in self._paginate(url, self._page_params()):
            item = _parse(SpotifyPlaylistItem, raw, url)
            if item.track is not None and item.track.is_searchable:
                queries.append(item.track.query)
        return queries

    async def queries_for(self, url: str, kind: LinkKind) -> list[str]:
        catalog_id = spotify_id(url)
        if catalog_id is None or not kind.is_spotify:
            raise SpotifyLookupError(ErrorMessages.SPOTIFY_UNSUPPORTED_LINK)

        if kind is LinkKind.SPOTIFY_TRACK:
            query = await self.track_query(catalog_id)
            queries = [query] if query else []
        elif kind is LinkKind.SPOTIFY_ALBUM:
            queries = await self.album_queries(catalog_id)
        else:
            queries = await self.playlist_queries(catalog_id)

        logger.info(LogTemplates.SPOTIFY_EXPANDED, kind.value, catalog_id, len(queries))
        return queries

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _decode(response: httpx.Response, url: str) -> dict[str, Any]:
    """JSON object body of a successful response."""
    try:
        data = response.json()
    except ValueError as e:
        raise SpotifyLookupError(
            ErrorMessages.SPOTIFY_BAD_RESPONSE.format(path=url), status_code=response.status_code
        ) from e
    if not isinstance(data, dict):
        raise SpotifyLookupError(
            ErrorMessages.SPOTIFY_BAD_RESPONSE.format(path=url), status_code=response.status_code
        )
    return data


def _parse(model: type[ModelT], data: Any, url: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SpotifyLookupError(ErrorMessages.SPOTIFY_BAD_RESPONSE.format(path=url)) from e
