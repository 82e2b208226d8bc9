"""
Proxy URL resolution logic.
"""
import logging
from typing import Optional, Union

import httpx

from .errors import InvalidProxyUrlError
from .types import ResolvedProxy

logger = logging.getLogger(__name__)


def redact_url(url: Union[str, httpx.URL]) -> str:
    """Render a URL for logs with any password masked."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return "<unparseable url>"
    if parsed.password:
        parsed = parsed.copy_with(username=parsed.username, password="****")
    return str(parsed)


def select_proxy_setting(
    target_scheme: str,
    http_proxy: Optional[str] = None,
    https_proxy: Optional[str] = None
) -> Optional[str]:
    """Pick the proxy setting for a target scheme.

    Only ``http`` targets use ``http_proxy``; every other scheme, known or
    not, falls back to ``https_proxy``.
    """
    if target_scheme == "http":
        return http_proxy
    return https_proxy


def _authority(raw: str) -> str:
    rest = raw.split("://", 1)[1]
    for sep in ("/", "?", "#"):
        rest = rest.split(sep, 1)[0]
    return rest


def parse_proxy_url(raw: str) -> httpx.URL:
    """Parse a proxy URL, raising InvalidProxyUrlError on malformed input."""
    if _authority(raw).count("@") > 1:
        # credentials containing a raw '@' are ambiguous
        raise InvalidProxyUrlError(raw)
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise InvalidProxyUrlError(raw) from e
    if not url.host:
        raise InvalidProxyUrlError(raw)
    return url


def resolve_proxy_url(
    target: Union[str, httpx.URL],
    http_proxy: Optional[str] = None,
    https_proxy: Optional[str] = None
) -> Optional[httpx.URL]:
    """Resolve the proxy URL for a target URL.

    Returns None when no proxy is configured for the target's scheme. A
    proxy setting without a scheme inherits the target's scheme, so
    ``proxy:3128`` for an http target becomes ``http://proxy:3128``.
    """
    target_url = httpx.URL(target)
    proxy = select_proxy_setting(target_url.scheme, http_proxy, https_proxy)
    if not proxy:
        logger.debug(f"No proxy configured for scheme '{target_url.scheme}'")
        return None

    if "://" not in proxy:
        proxy = f"{target_url.scheme}://{proxy}"

    url = parse_proxy_url(proxy)
    logger.debug(f"Resolved proxy {redact_url(url)} for {target_url.scheme} target")
    return url


def resolve_proxy(
    target: Union[str, httpx.URL],
    http_proxy: Optional[str] = None,
    https_proxy: Optional[str] = None
) -> Optional[ResolvedProxy]:
    """Like :func:`resolve_proxy_url` but keeps the decoded credentials at hand."""
    url = resolve_proxy_url(target, http_proxy, https_proxy)
    if url is None:
        return None
    return ResolvedProxy(url=url, raw=str(url))
