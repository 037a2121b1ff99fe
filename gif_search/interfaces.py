from __future__ import annotations
from pathlib import Path
from typing import Protocol, Sequence
from .models import SearchQuery, SearchResult


class SearchEngine(Protocol):
    async def search(self, query: SearchQuery) -> Sequence[SearchResult]: ...


class AutocompleteEngine(Protocol):
    async def suggest(self, query: str) -> Sequence[str]: ...


class ContentCache(Protocol):
    async def ensure_cached(self, url: str) -> Path:
        """remote URL -> local path (同じファイル名なら2回目以降はネットワークなし)"""
        ...
