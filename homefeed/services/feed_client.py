from __future__ import annotations

import logging
from typing import Callable, Iterable, Union

import requests
from pydantic import ValidationError

from homefeed.config.settings import get_settings
from homefeed.models.schemas import Feed

logger = logging.getLogger(__name__)

# a proxy address, or a getter that yields one once the proxy is up
ProxyAddr = Union[str, Callable[[], str], None]


class FeedError(Exception):
    pass


class FeedFetchError(FeedError):
    """Request could not be built, sent, or its body read."""


class ProxyResolutionError(FeedError):
    """The HTTP client could not be set up for the given proxy."""


class MalformedFeedError(FeedError):
    """The body was fetched but is not a feed document."""


def resolve_locale(
    locale: str | None,
    supported: Iterable[str] | None = None,
    default: str | None = None,
) -> str:
    # always fall back to the default feed when there is
    # no feed published for a specific locale
    if supported is None or default is None:
        s = get_settings()
        supported = s.supported_locales if supported is None else supported
        default = s.default_locale if default is None else default
    if locale and locale in supported:
        return locale
    return default


def feed_url(locale: str | None) -> str:
    return get_settings().feed_url(resolve_locale(locale))


def resolve_proxy(proxy_addr: ProxyAddr) -> str | None:
    if callable(proxy_addr):
        try:
            proxy_addr = proxy_addr()
        except Exception as e:
            raise ProxyResolutionError(f"Couldn't resolve proxy address: {e}") from e
        if not isinstance(proxy_addr, str) or not proxy_addr.strip():
            raise ProxyResolutionError(f"Proxy getter returned {proxy_addr!r}")

    if proxy_addr is None:
        return None
    if not isinstance(proxy_addr, str):
        raise ProxyResolutionError(f"Proxy address must be a string, got {proxy_addr!r}")

    addr = proxy_addr.strip()
    if not addr:
        return None
    if "://" not in addr:
        addr = f"http://{addr}"
    return addr


def build_session(proxy_addr: ProxyAddr = None) -> requests.Session:
    """
    Plain session when there is no proxy, otherwise one that
    tunnels both http and https through the proxy.
    """
    proxy_url = resolve_proxy(proxy_addr)
    session = requests.Session()
    if proxy_url is not None:
        logger.debug("Fetching feed through proxy %s", proxy_url)
        session.proxies.update({"http": proxy_url, "https": proxy_url})
    return session


def fetch_feed_bytes(
    url: str,
    session: requests.Session,
    timeout: float | None = None,
) -> bytes:
    try:
        r = session.get(url, timeout=timeout)
    except (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
    ) as e:
        raise FeedFetchError(f"Error building request for {url}: {e}") from e
    except requests.RequestException as e:
        raise FeedFetchError(f"Error fetching feed {url}: {e}") from e

    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise FeedFetchError(f"Error fetching feed {url}: {e}") from e

    try:
        return r.content
    except requests.RequestException as e:
        raise FeedFetchError(f"Error reading body of {url}: {e}") from e


def decode_feed(raw: bytes | str) -> Feed:
    try:
        return Feed.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedFeedError(
            f"Couldn't decode feed ({e.error_count()} errors):\n{str(e)[:2000]}"
        ) from e
