import asyncio
from pathlib import Path

import pytest

from gif_search.config import Config
from gif_search.enrich import ResultEnricher, build_item, enrich
from gif_search.errors import RemoteFetchError
from gif_search.interfaces import ContentCache
from gif_search.models import MediaFormat, SearchResult

FALLBACK = Path("/workflow/icon.png")


def cfg(**kw) -> Config:
    base = dict(api_key="k", cache_dir=Path("/tmp/unused"), fallback_icon=FALLBACK)
    base.update(kw)
    return Config(**base)


def result(id_, preview=True, output=True, item_url=True, desc=True) -> SearchResult:
    formats = {}
    if preview:
        formats["nanogif"] = MediaFormat(url=f"https://media.tenor.com/{id_}/nano.gif")
    if output:
        formats["tinygif"] = MediaFormat(url=f"https://media.tenor.com/{id_}/tiny.gif")
    return SearchResult(
        id=id_,
        content_description=f"gif {id_}" if desc else None,
        item_url=f"https://tenor.com/view/item-{id_}" if item_url else None,
        media_formats=formats,
    )


class DelayedCache(ContentCache):
    """URLごとに決めた遅延で返す。完了順を記録する。"""

    def __init__(self, delays: dict[str, float], fail: set[str] = frozenset()) -> None:
        self.delays = delays
        self.fail = fail
        self.completed: list[str] = []
        self.calls: list[str] = []

    async def ensure_cached(self, url: str) -> Path:
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        self.completed.append(url)
        if url in self.fail:
            raise RemoteFetchError(500, url)
        return Path("/cache") / url.split("/")[-2]


@pytest.mark.asyncio
async def test_order_restored_despite_reverse_completion():
    results = [result(str(i)) for i in range(8)]
    # 先頭ほど遅い -> 完了順は逆
    delays = {r.media_url("nanogif"): 0.01 * (8 - i) for i, r in enumerate(results)}
    cache = DelayedCache(delays)

    items = await enrich(results, cfg(), cache)

    assert cache.completed[0].endswith("/7/nano.gif")
    assert cache.completed[-1].endswith("/0/nano.gif")
    assert [it.uid for it in items] == [r.id for r in results]
    assert [it.icon_path for it in items] == [f"/cache/{i}" for i in range(8)]


@pytest.mark.asyncio
async def test_single_cache_failure_falls_back():
    results = [result("a"), result("b"), result("c")]
    bad = results[1].media_url("nanogif")
    cache = DelayedCache({}, fail={bad})

    items = await ResultEnricher(cfg(), cache).enrich(results)

    assert len(items) == 3
    assert items[1].valid is True
    assert items[1].icon_path == str(FALLBACK)
    assert items[0].icon_path == "/cache/a"
    assert items[2].icon_path == "/cache/c"


@pytest.mark.asyncio
async def test_missing_preview_uses_fallback_without_cache_call():
    cache = DelayedCache({})
    items = await enrich([result("a", preview=False)], cfg(), cache)
    assert items[0].icon_path == str(FALLBACK)
    assert cache.calls == []


@pytest.mark.asyncio
async def test_cache_disabled_uses_fallback():
    cache = DelayedCache({})
    items = await enrich([result("a")], cfg(cache_enabled=False), cache)
    assert items[0].icon_path == str(FALLBACK)
    assert cache.calls == []


@pytest.mark.asyncio
async def test_empty_input():
    assert await enrich([], cfg(), DelayedCache({})) == []


@pytest.mark.asyncio
async def test_bounded_fan_out_keeps_order():
    running = 0
    peak = 0

    class CountingCache(ContentCache):
        async def ensure_cached(self, url: str) -> Path:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return Path("/cache") / url.split("/")[-2]

    results = [result(str(i)) for i in range(10)]
    items = await enrich(results, cfg(max_concurrency=3), CountingCache())
    assert peak <= 3
    assert [it.uid for it in items] == [str(i) for i in range(10)]


def test_arg_prefers_item_url_when_output_missing():
    item = build_item(result("a", output=False), cfg(), "/icon")
    assert item.arg == "https://tenor.com/view/item-a"
    assert item.subtitle == "Select to copy URL: post"


def test_arg_precedence_chain():
    c = cfg()
    assert build_item(result("a"), c, "/i").arg == "https://media.tenor.com/a/tiny.gif"
    assert (
        build_item(result("a", output=False, item_url=False), c, "/i").arg
        == "https://media.tenor.com/a/nano.gif"
    )
    assert (
        build_item(result("a", preview=False, output=False, item_url=False), c, "/i").arg
        == "https://tenor.com/view/a"
    )


def test_presentation_fields():
    c = cfg()
    full = build_item(result("a"), c, "/i")
    assert full.title == "gif a"
    assert full.autocomplete == "gif a"
    assert full.subtitle == "Select to copy URL: tinygif"
    assert full.quicklook_url == "https://media.tenor.com/a/nano.gif"
    assert full.alt.arg == "https://media.tenor.com/a/nano.gif"
    assert full.alt.subtitle == "Copy nanogif URL: https://media.tenor.com/a/nano.gif"
    assert full.cmd.arg == "https://tenor.com/view/item-a"
    assert full.cmd.subtitle == "Open Tenor page: https://tenor.com/view/item-a"

    bare = build_item(
        result("b", preview=False, output=False, item_url=False, desc=False), c, "/i"
    )
    assert bare.title == "GIF Result b"
    assert bare.alt.arg == bare.arg == "https://tenor.com/view/b"
    assert bare.alt.subtitle == "Copy nanogif URL: N/A"
    assert bare.cmd.arg == "https://tenor.com/view/b"
    assert bare.cmd.subtitle == "Open Tenor page: N/A"
    assert bare.quicklook_url == bare.arg
