import asyncio
import sys

import httpx

from gif_search.alfred import render_items, render_suggestions, usage_items
from gif_search.config import load_config
from gif_search.models import EnrichedItem
from gif_search.tenor_engine import TenorAutocompleteEngine

from logging import getLogger, basicConfig, WARNING

basicConfig(level=WARNING, format="[%(levelname)s](%(name)s): %(message)s", force=True)
logger = getLogger("gif_search.autocomplete")


async def main(argv: list[str]) -> str:
    query = " ".join(argv).strip().lower()
    if not query:
        return render_items(usage_items())

    config = load_config()
    async with httpx.AsyncClient() as client:
        engine = TenorAutocompleteEngine(client, config)
        try:
            suggestions = await engine.suggest(query)
        except Exception as e:
            logger.error(f"autocomplete failed: {e!r}")
            return render_items([EnrichedItem.placeholder("Error", str(e))])

    return render_suggestions(query, suggestions)


if __name__ == "__main__":
    print(asyncio.run(main(sys.argv[1:])))
