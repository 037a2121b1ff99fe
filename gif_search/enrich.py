from __future__ import annotations
import asyncio
from typing import Optional, Sequence

from .concurrency import ConcurrencyConfig, FanOutLimiter
from .config import Config
from .interfaces import ContentCache
from .models import EnrichedItem, ModAction, SearchResult
from .url_utils import view_url

from logging import getLogger

logger = getLogger(__name__)


def build_item(result: SearchResult, config: Config, icon_path: str) -> EnrichedItem:
    """SearchResult + 解決済みアイコン -> EnrichedItem（I/Oなし）"""
    preview = result.media_url(config.preview_quality)
    output = result.media_url(config.output_quality)

    # output > itemurl > preview > view URL の順
    arg = output or result.item_url or preview or view_url(result.id)

    title = result.content_description or f"GIF Result {result.id}"
    subtitle = "Select to copy URL: " + (config.output_quality if output else "post")

    alt = ModAction(
        arg=preview or arg,
        subtitle=f"Copy {config.preview_quality} URL: {preview or 'N/A'}",
    )
    cmd = ModAction(
        arg=result.item_url or view_url(result.id),
        subtitle=f"Open Tenor page: {result.item_url or 'N/A'}",
    )

    return EnrichedItem(
        uid=result.id,
        title=title,
        subtitle=subtitle,
        arg=arg,
        autocomplete=title,
        icon_path=icon_path,
        quicklook_url=preview or arg,
        alt=alt,
        cmd=cmd,
        valid=True,
    )


class ResultEnricher:
    """
    結果ごとに1タスクでアイコンをキャッシュし、EnrichedItem を作る。
    - 1件の失敗は fallback icon + warning に吸収（バッチは止めない）
    - 完了順はバラバラなので index を付けて回収し、最後に index で並べ直す
    """

    def __init__(
        self,
        config: Config,
        cache: Optional[ContentCache] = None,
    ) -> None:
        self._cfg = config
        self._cache = cache
        self._limiter = FanOutLimiter(
            ConcurrencyConfig(max_concurrency=config.max_concurrency)
        )

    async def resolve_icon(self, result: SearchResult) -> str:
        fallback = str(self._cfg.fallback_icon)
        preview = result.media_url(self._cfg.preview_quality)

        if preview is None:
            logger.warning(
                f"no '{self._cfg.preview_quality}' URL for {result.id}, using fallback icon"
            )
            return fallback

        if not self._cfg.cache_enabled or self._cache is None:
            return fallback

        try:
            cached = await self._cache.ensure_cached(preview)
        except Exception as e:
            logger.warning(f"failed to cache icon for {result.id}: {e!r}")
            return fallback
        return str(cached)

    async def enrich_one(
        self, index: int, result: SearchResult
    ) -> tuple[int, EnrichedItem]:
        async with self._limiter.slot():
            icon_path = await self.resolve_icon(result)
        return index, build_item(result, self._cfg, icon_path)

    async def enrich(self, results: Sequence[SearchResult]) -> list[EnrichedItem]:
        tasks = [
            asyncio.create_task(self.enrich_one(i, r)) for i, r in enumerate(results)
        ]

        buffer: list[tuple[int, EnrichedItem]] = []
        for fut in asyncio.as_completed(tasks):
            buffer.append(await fut)

        # API のランキング順に戻す
        buffer.sort(key=lambda pair: pair[0])
        return [item for _, item in buffer]


async def enrich(
    results: Sequence[SearchResult],
    config: Config,
    cache: Optional[ContentCache] = None,
) -> list[EnrichedItem]:
    return await ResultEnricher(config, cache).enrich(results)
