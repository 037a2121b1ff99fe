from __future__ import annotations
from typing import Sequence

import httpx
from pydantic import ValidationError

from .config import Config, require_api_key
from .errors import DecodeError, RemoteFetchError
from .interfaces import AutocompleteEngine, SearchEngine
from .models import AutocompleteResponse, SearchQuery, SearchResponse, SearchResult
from .url_utils import join_api_url

from logging import getLogger

logger = getLogger(__name__)


class TenorSearchEngine(SearchEngine):
    """
    Tenor v2 /search を1回叩いて結果をそのままの順序で返す。
    ※ 順序は API のランキングを信頼する（ここでも後段でも並べ替えない）。
    """

    def __init__(self, client: httpx.AsyncClient, config: Config) -> None:
        self._client = client
        self._cfg = config

    def build_params(self, query: SearchQuery) -> dict[str, str]:
        limit = query.limit if query.limit is not None else self._cfg.limit
        return {
            "q": query.q,
            "key": self._cfg.api_key,
            "limit": str(limit),
            "media_filter": f"{self._cfg.preview_quality},{self._cfg.output_quality}",
        }

    async def search(self, query: SearchQuery) -> Sequence[SearchResult]:
        # key がなければリクエストしない
        require_api_key(self._cfg.api_key)

        url = join_api_url(self._cfg.api_base_url, "search")
        try:
            r = await self._client.get(
                url, params=self.build_params(query), timeout=self._cfg.timeout_s
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteFetchError(-1, url) from e

        if r.status_code != 200:
            raise RemoteFetchError(r.status_code, url)

        try:
            resp = SearchResponse.model_validate_json(r.content)
        except ValidationError as e:
            raise DecodeError(f"failed to decode search response: {e}") from e

        logger.info(f"search '{query.q}': {len(resp.results)} results")
        return list(resp.results)


class TenorAutocompleteEngine(AutocompleteEngine):
    def __init__(self, client: httpx.AsyncClient, config: Config) -> None:
        self._client = client
        self._cfg = config

    async def suggest(self, query: str) -> Sequence[str]:
        require_api_key(self._cfg.api_key)

        url = join_api_url(self._cfg.api_base_url, "autocomplete")
        try:
            r = await self._client.get(
                url,
                params={"key": self._cfg.api_key, "q": query},
                timeout=self._cfg.timeout_s,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteFetchError(-1, url) from e

        # autocomplete は 2xx なら OK
        if not r.is_success:
            raise RemoteFetchError(r.status_code, url)

        try:
            resp = AutocompleteResponse.model_validate_json(r.content)
        except ValidationError as e:
            raise DecodeError(f"failed to decode autocomplete response: {e}") from e
        return list(resp.results)
