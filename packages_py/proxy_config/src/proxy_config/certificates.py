"""
Per-registry client certificate selection.
"""
import logging
from typing import Mapping, Optional, Union

import httpx

from .types import ClientCertificate

logger = logging.getLogger(__name__)


def nerf_dart(url: Union[str, httpx.URL]) -> str:
    """Reduce a URL to its scheme-less ``//host[:port]/path/`` form.

    Registry settings are keyed this way so that ``https://reg/`` and
    ``http://reg/`` share one entry.
    """
    raw = str(url)
    if raw.startswith("//"):
        raw = f"https:{raw}"
    elif "://" not in raw:
        raw = f"https://{raw}"
    parsed = httpx.URL(raw)
    netloc = parsed.host if parsed.port is None else f"{parsed.host}:{parsed.port}"
    path = parsed.path or "/"
    if not path.endswith("/"):
        path += "/"
    return f"//{netloc}{path}"


def pick_client_certificate(
    client_certificates: Optional[Mapping[str, ClientCertificate]],
    uri: Union[str, httpx.URL]
) -> Optional[ClientCertificate]:
    """Return the certificate registered for the most specific prefix of ``uri``."""
    if not client_certificates:
        return None

    target = nerf_dart(uri)
    best: Optional[str] = None
    for prefix in client_certificates:
        candidate = nerf_dart(prefix)
        if target.startswith(candidate) and (best is None or len(candidate) > len(nerf_dart(best))):
            best = prefix

    if best is None:
        return None
    logger.debug(f"Using client certificate registered for '{best}'")
    return client_certificates[best]
