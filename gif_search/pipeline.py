from __future__ import annotations
from typing import Callable, Optional

import httpx

from .cache import MediaCacheConfig, MediaCacheStore
from .config import Config
from .enrich import ResultEnricher
from .errors import PersistenceError
from .interfaces import ContentCache, SearchEngine
from .models import EnrichedItem, SearchQuery
from .tenor_engine import TenorSearchEngine

from logging import getLogger

logger = getLogger(__name__)

CacheFactory = Callable[[Config], ContentCache]


class GifSearchPipeline:
    """
    search -> enrich を順に実行する。
    検索失敗・0件・キャッシュ初期化失敗は placeholder 1件にして返す（例外は外に出さない）。
    """

    def __init__(
        self,
        *,
        engine: SearchEngine,
        config: Config,
        cache_factory: Optional[CacheFactory] = None,
    ) -> None:
        self._engine = engine
        self._cfg = config
        self._cache_factory = cache_factory
        self._cache: Optional[ContentCache] = None

    def _open_cache(self) -> Optional[ContentCache]:
        if not self._cfg.cache_enabled or self._cache_factory is None:
            return None
        if self._cache is None:
            self._cache = self._cache_factory(self._cfg)
        return self._cache

    async def run(self, query: SearchQuery) -> list[EnrichedItem]:
        try:
            cache = self._open_cache()
        except PersistenceError as e:
            logger.error(f"cache init failed: {e}")
            return [EnrichedItem.placeholder("Cache Init Error", str(e))]

        try:
            results = await self._engine.search(query)
        except Exception as e:
            logger.error(f"search failed: {e!r}")
            return [EnrichedItem.placeholder("Error fetching GIFs", str(e))]

        if not results:
            return [
                EnrichedItem.placeholder(
                    f"No GIFs found for '{query.q}'", "Try a different search term."
                )
            ]

        return await ResultEnricher(self._cfg, cache).enrich(results)


def build_pipeline(client: httpx.AsyncClient, config: Config) -> GifSearchPipeline:
    """Tenor + ディスクキャッシュで組み立てる（CLI/server 共通）"""
    def _cache_factory(cfg: Config) -> ContentCache:
        return MediaCacheStore(
            client,
            MediaCacheConfig(dir_path=str(cfg.cache_dir)),
            timeout_s=cfg.timeout_s,
        )

    return GifSearchPipeline(
        engine=TenorSearchEngine(client, config),
        config=config,
        cache_factory=_cache_factory,
    )
