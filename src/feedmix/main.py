import asyncio
import logging
import sys

import structlog

from feedmix.config import Settings, get_settings
from feedmix.models import ContentItem
from feedmix.services.aggregator import ContentAggregator
from feedmix.utils.date_utils import format_time_ago


def configure_logging(log_level: str) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def build_feed(settings: Settings, query: str | None = None) -> list[ContentItem]:
    aggregator = ContentAggregator(settings)
    await aggregator.initialize()
    try:
        if query:
            return await aggregator.search_all_content(query)
        return await aggregator.fetch_personalized_content(
            ContentAggregator.get_default_preferences()
        )
    finally:
        await aggregator.close()


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    logger = structlog.get_logger()
    query = " ".join(sys.argv[1:]).strip() or None
    logger.info("Building feed", query=query)

    try:
        items = asyncio.run(build_feed(settings, query))
    except KeyboardInterrupt:
        logger.info("Feed build interrupted")
        return
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)

    for item in items:
        logger.info(
            "Feed item",
            source=item.source.value,
            age=format_time_ago(item.date),
            title=item.title,
            author=item.author,
        )
    logger.info("Feed built", count=len(items))


if __name__ == "__main__":
    main()
