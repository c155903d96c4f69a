"""GitHub crawlers producing ``{source, count, results}`` JSON reports."""

from .report import write_report
from .trending import crawl_trending, parse_trending
from .topic import crawl_topic, collect_topic

__all__ = ["write_report", "crawl_trending", "parse_trending", "crawl_topic", "collect_topic"]
