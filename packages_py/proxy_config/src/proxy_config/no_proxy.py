"""
Proxy bypass matching.
"""
import logging
from typing import List, Optional, Union

import httpx

logger = logging.getLogger(__name__)


def _reversed_labels(name: str) -> List[str]:
    return [label for label in name.lower().split(".") if label][::-1]


def check_no_proxy(hostname: str, no_proxy: Optional[Union[bool, str]]) -> bool:
    """Return True when ``hostname`` must not be proxied.

    ``no_proxy`` is either a boolean or a comma separated list of host
    suffixes. A pattern matches when its labels equal the host's trailing
    labels, so ``example.com`` matches ``example.com`` and
    ``registry.example.com`` but not ``badexample.com``.
    """
    if isinstance(no_proxy, bool):
        return no_proxy
    if not no_proxy:
        return False

    host = _reversed_labels(hostname)
    for pattern in no_proxy.split(","):
        parts = _reversed_labels(pattern.strip())
        if not parts or len(parts) > len(host):
            continue
        if host[:len(parts)] == parts:
            logger.debug(f"Host '{hostname}' bypasses proxy via no_proxy entry '{pattern.strip()}'")
            return True
    return False


def check_no_proxy_for_url(uri: Union[str, httpx.URL], no_proxy: Optional[Union[bool, str]]) -> bool:
    """Same as :func:`check_no_proxy` for the host of a full URL."""
    return check_no_proxy(httpx.URL(uri).host, no_proxy)
