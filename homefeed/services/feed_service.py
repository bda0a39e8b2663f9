from __future__ import annotations

import logging
import threading
from typing import Protocol

from homefeed.config.settings import Settings, get_settings
from homefeed.models.schemas import Feed, FeedItem
from homefeed.services.feed_client import (
    FeedFetchError,
    ProxyAddr,
    ProxyResolutionError,
    build_session,
    decode_feed,
    fetch_feed_bytes,
    resolve_locale,
)

logger = logging.getLogger(__name__)

ALL = "all"


class FeedProvider(Protocol):
    def add_source(self, name: str) -> None: ...


class FeedRetriever(Protocol):
    def add_feed(self, title: str, description: str, image: str, link: str) -> None: ...

    def finish(self) -> None: ...


def shorten_description(item: FeedItem, max_chars: int = 150) -> str:
    desc = item.meta.get("description")
    if not isinstance(desc, str):
        return ""
    # slices code points, never splits a multi-byte character
    return desc.strip()[:max_chars]


def source_titles(feed: Feed) -> list[str]:
    return sorted({s.title for s in feed.feeds.values() if s.title})


def notify_sources(feed: Feed, provider: FeedProvider) -> None:
    # send the feed sources back to the UI
    for title in source_titles(feed):
        logger.debug("Adding feed source: %s", title)
        provider.add_source(title)


def process_feed(feed: Feed, max_chars: int = 150) -> Feed:
    """
    Runs after a feed has been downloaded: rebuilds the grouping index
    and shortens every description.

    Everything derived is recomputed from `feeds`/`entries`, so running it
    again on the same feed gives the same result.
    """
    logger.debug("Num of feed entries: %d", len(feed.entries))

    # the 'all' tab contains every article
    items: dict[str, list[FeedItem]] = {ALL: list(feed.entries)}

    for entry in feed.entries:
        entry.description = shorten_description(entry, max_chars)

    n = len(feed.entries)
    for key in sorted(feed.feeds):
        source = feed.feeds[key]
        for i in source.entries:
            if not 0 <= i < n:
                logger.warning(
                    "Source %r references missing entry %d (feed has %d entries)",
                    source.title or key, i, n,
                )
                continue
            items.setdefault(source.title, []).append(feed.entries[i])

    feed.items = items
    return feed


class FeedService:
    """
    Owns the latest feed snapshot. Fetches are serialized; a snapshot is
    built completely before it replaces the previous one, so lookups
    always see either the old or the new feed.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._feed = Feed()
        self._fetch_lock = threading.Lock()

    @property
    def snapshot(self) -> Feed:
        return self._feed

    def feed_url(self, locale: str | None) -> str:
        s = self.settings
        return s.feed_url(resolve_locale(locale, s.supported_locales, s.default_locale))

    def get_feed(
        self,
        locale: str | None,
        proxy_addr: ProxyAddr = None,
        provider: FeedProvider | None = None,
    ) -> bool:
        """
        Fetch the public feed for `locale`, through `proxy_addr` if given.

        Returns False when the feed could not be downloaded (already logged).
        Raises MalformedFeedError when the body is not a feed document.
        The previous snapshot is kept in both cases.
        """
        url = self.feed_url(locale)

        with self._fetch_lock:
            try:
                session = build_session(proxy_addr)
            except ProxyResolutionError as e:
                logger.error("Error creating client: %s", e)
                return False

            try:
                raw = fetch_feed_bytes(url, session, timeout=self.settings.http_timeout)
            except FeedFetchError as e:
                logger.error("%s", e)
                return False
            finally:
                session.close()

            feed = process_feed(decode_feed(raw), max_chars=self.settings.description_max_chars)
            self._feed = feed

        logger.info("Loaded %d entries from %s", len(feed.entries), url)

        if provider is not None:
            notify_sources(feed, provider)
        return True

    def feed_by_name(self, name: str, retriever: FeedRetriever) -> None:
        for title, description, image, link in self.items(name):
            retriever.add_feed(title, description, image, link)
        retriever.finish()

    def items(self, name: str) -> list[tuple[str, str, str, str]]:
        group = self._feed.items.get(name) or []
        return [(i.title, i.description, i.image, i.link) for i in group]

    def sources(self) -> list[str]:
        return source_titles(self._feed)


_service: FeedService | None = None

def get_feed_service() -> FeedService:
    global _service
    if _service is None:
        _service = FeedService()
    return _service


def get_feed(locale: str | None, proxy_addr: ProxyAddr = None, provider: FeedProvider | None = None) -> bool:
    return get_feed_service().get_feed(locale, proxy_addr, provider)


def feed_by_name(name: str, retriever: FeedRetriever) -> None:
    get_feed_service().feed_by_name(name, retriever)
