from __future__ import annotations

from typing import Optional

import httpx
from fastapi import FastAPI, Query

from gif_search.alfred import AlfredOutput, build_output, build_suggestions
from gif_search.config import Config, load_config
from gif_search.models import EnrichedItem, SearchQuery
from gif_search.pipeline import GifSearchPipeline, build_pipeline
from gif_search.tenor_engine import TenorAutocompleteEngine

from logging import getLogger

logger = getLogger(__name__)


# -----------------------
# App + Lifespan
# -----------------------

app = FastAPI(title="gif-search-server")

# shared singletons
_http_client: httpx.AsyncClient | None = None
_config: Config | None = None
_pipeline: GifSearchPipeline | None = None


@app.on_event("startup")
async def startup() -> None:
    global _http_client, _config, _pipeline

    _http_client = httpx.AsyncClient()
    _config = load_config()
    _pipeline = build_pipeline(_http_client, _config)


@app.on_event("shutdown")
async def shutdown() -> None:
    global _http_client, _pipeline
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
    _pipeline = None


@app.get("/search", response_model=AlfredOutput, response_model_exclude_none=True)
async def search(
    q: str = Query(..., min_length=1),
    limit: Optional[int] = Query(default=None, ge=1, le=50),
) -> AlfredOutput:
    """
    GET /search?q=...&limit=...
    response: Alfred script filter JSON (items はランキング順)
    """
    assert _pipeline is not None

    items: list[EnrichedItem] = await _pipeline.run(SearchQuery(q=q, limit=limit))
    return build_output(items)


@app.get("/autocomplete", response_model=AlfredOutput, response_model_exclude_none=True)
async def autocomplete(q: str = Query(..., min_length=1)) -> AlfredOutput:
    assert _http_client is not None
    assert _config is not None

    query = q.strip().lower()
    engine = TenorAutocompleteEngine(_http_client, _config)
    try:
        suggestions = await engine.suggest(query)
    except Exception as e:
        logger.error(f"autocomplete failed: {e!r}")
        return build_output([EnrichedItem.placeholder("Error", str(e))])
    return build_suggestions(query, suggestions)
