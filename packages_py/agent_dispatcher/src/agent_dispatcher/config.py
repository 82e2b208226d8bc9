"""
Environment driven configuration.
"""
import os
import logging
from typing import Any, Dict, List, Optional

from proxy_config import ConnectionOptions

from .cache import DEFAULT_CACHE_CAPACITY

logger = logging.getLogger(__name__)


def is_ssl_verify_disabled_by_env() -> bool:
    """Check if SSL verification is disabled by environment variables."""
    # Node.js compatibility
    if os.getenv("NODE_TLS_REJECT_UNAUTHORIZED") == "0":
        return True

    # Python convention
    if os.getenv("SSL_CERT_VERIFY") == "0":
        return True

    return False


def _first_env(keys: List[str]) -> Optional[str]:
    for key in keys:
        val = os.getenv(key)
        if val:
            return val
    return None


def _env_int(keys: List[str]) -> Optional[int]:
    val = _first_env(keys)
    if val is None:
        return None
    try:
        return int(val)
    except ValueError:
        logger.warning(f"Ignoring non-integer value '{val}' for {keys[0]}")
        return None


def get_cache_capacity(default: int = DEFAULT_CACHE_CAPACITY) -> int:
    """Capacity of each agent cache, from AGENT_CACHE_CAPACITY."""
    capacity = _env_int(["AGENT_CACHE_CAPACITY"])
    if capacity is None or capacity < 1:
        return default
    logger.debug(f"Using agent cache capacity {capacity}")
    return capacity


def load_connection_options(**overrides: Any) -> ConnectionOptions:
    """Build ConnectionOptions from the environment.

    Precedence:
    1. explicit keyword overrides (None values are ignored)
    2. HTTP_PROXY / HTTPS_PROXY / NO_PROXY (upper or lower case)
    3. AGENT_LOCAL_ADDRESS, AGENT_MAX_SOCKETS, AGENT_TIMEOUT_MS
    4. model defaults

    ``NO_PROXY=*`` disables proxying for every host.
    """
    values: Dict[str, Any] = {
        "http_proxy": _first_env(["HTTP_PROXY", "http_proxy"]),
        "https_proxy": _first_env(["HTTPS_PROXY", "https_proxy"]),
        "no_proxy": _first_env(["NO_PROXY", "no_proxy"]),
        "local_address": _first_env(["AGENT_LOCAL_ADDRESS"]),
        "max_sockets": _env_int(["AGENT_MAX_SOCKETS"]),
        "timeout": _env_int(["AGENT_TIMEOUT_MS"]),
    }
    if values["no_proxy"] is not None and values["no_proxy"].strip() == "*":
        values["no_proxy"] = True
    if is_ssl_verify_disabled_by_env():
        logger.debug("SSL verification disabled by environment")
        values["strict_ssl"] = False

    values.update({k: v for k, v in overrides.items() if v is not None})
    values = {k: v for k, v in values.items() if v is not None}
    return ConnectionOptions.model_validate(values)
