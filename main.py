"""
PageGraph Build Entry Point

Run with: python main.py [config.yaml]
Prints the generated page descriptors as JSON.
"""

import asyncio
import json
import sys

from pagegraph.config import Config
from pagegraph.models.report import BuildResult
from pagegraph.sites import book_club
from pagegraph.utils.logger import setup_logging


async def build(config: Config) -> BuildResult:
    pipeline = book_club.create_pipeline(config)
    try:
        return await pipeline.run(book_club.sources())
    finally:
        await pipeline.close()


if __name__ == "__main__":
    config = Config.from_env_or_yaml(sys.argv[1] if len(sys.argv) > 1 else None)
    setup_logging(**config.logging.model_dump())

    result = asyncio.run(build(config))
    print(json.dumps([page.model_dump(mode="json") for page in result.pages], indent=2))
