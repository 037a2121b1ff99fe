from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional


@dataclass(frozen=True)
class ConcurrencyConfig:
    # None = 1 result 1 task (上限なし)
    max_concurrency: Optional[int] = None


class FanOutLimiter:
    """
    enrich の同時実行数を任意で絞る。max_concurrency=None なら何もしない。
    """

    def __init__(self, cfg: ConcurrencyConfig = ConcurrencyConfig()) -> None:
        self._sem = (
            asyncio.Semaphore(cfg.max_concurrency)
            if cfg.max_concurrency is not None
            else None
        )

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        if self._sem is None:
            yield
            return
        async with self._sem:
            yield


class KeyedLock:
    """
    key (cache filename) 単位で asyncio.Lock を割り当てる。
    同じファイル名への同時ダウンロードを1本にまとめるために使う。
    """

    def __init__(self) -> None:
        self._by_key: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._by_key.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._by_key[key] = lock
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                # 誰も待っていなければ捨てる（無限に増えないように）
                del self._waiters[key]
                del self._by_key[key]

    def __len__(self) -> int:
        return len(self._by_key)
