import asyncio
import sys

import httpx

from gif_search.alfred import render_items, usage_items
from gif_search.config import load_config
from gif_search.models import SearchQuery
from gif_search.pipeline import build_pipeline

from logging import getLogger, basicConfig, INFO, WARNING

# stdout は Alfred の JSON 専用。ログは stderr へ。
basicConfig(level=WARNING, format="[%(levelname)s](%(name)s): %(message)s", force=True)
logger = getLogger("gif_search.main")
getLogger("gif_search").setLevel(INFO)


async def main(argv: list[str]) -> str:
    if not argv:
        return render_items(usage_items())

    query = " ".join(argv)
    config = load_config()

    async with httpx.AsyncClient() as client:
        pipeline = build_pipeline(client, config)
        items = await pipeline.run(SearchQuery(q=query))

    return render_items(items)


if __name__ == "__main__":
    print(asyncio.run(main(sys.argv[1:])))
