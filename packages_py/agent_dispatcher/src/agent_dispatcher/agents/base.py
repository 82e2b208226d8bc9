"""
Abstract base agent and shared transport helpers.
"""
import logging
import socket
import ssl
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import certifi
import httpx
from proxy_config import TlsMaterial

logger = logging.getLogger(__name__)

DEFAULT_MAX_SOCKETS = 50
KEEPALIVE_EXPIRY = 15.0


class AgentKind(str, Enum):
    HTTP = "http"
    HTTPS = "https"
    HTTP_PROXY = "http-proxy"
    HTTPS_PROXY = "https-proxy"
    SOCKS_PROXY = "socks-proxy"


@dataclass(frozen=True)
class AgentSettings:
    """Settings an agent was built with.

    ``timeout`` is in milliseconds and already skewed by :func:`agent_timeout`.
    ``strict_ssl`` and ``tls`` only apply when ``secure`` (https target).
    """
    secure: bool = False
    max_sockets: int = DEFAULT_MAX_SOCKETS
    timeout: int = 0
    local_address: Optional[str] = None
    strict_ssl: bool = True
    tls: TlsMaterial = field(default_factory=TlsMaterial)
    proxy_url: Optional[httpx.URL] = None
    proxy_auth: Optional[Tuple[str, str]] = None


def agent_timeout(timeout: Optional[int]) -> int:
    """Map a caller timeout (ms) to the agent's own timeout.

    0 or missing disables the agent timeout. Anything else is pushed back by
    1ms so a caller-side timeout always fires first.
    """
    if not timeout:
        return 0
    return timeout + 1


def keepalive_socket_options() -> List[tuple]:
    """
    cross platform TCP keep-alive socket options
    """
    opts = []

    if hasattr(socket, "TCP_NODELAY"):
        opts.append((socket.IPPROTO_TCP, socket.TCP_NODELAY, 1))

    if hasattr(socket, "SO_KEEPALIVE"):
        opts.append((socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1))

    if hasattr(socket, "TCP_KEEPIDLE"):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 60))

    if hasattr(socket, "TCP_KEEPINTVL"):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, 10))

    return opts


def _load_ca(ctx: ssl.SSLContext, ca: str) -> None:
    if "-----BEGIN" in ca:
        ctx.load_verify_locations(cadata=ca)
    else:
        ctx.load_verify_locations(cafile=ca)


def build_ssl_context(strict_ssl: bool = True, tls: Optional[TlsMaterial] = None) -> ssl.SSLContext:
    """Build the client SSL context for an https target.

    A configured ``ca`` replaces the default trust store rather than
    extending it.
    """
    tls = tls or TlsMaterial()
    cas = tls.ca if isinstance(tls.ca, list) else [tls.ca] if tls.ca else []

    if cas:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        for ca in cas:
            _load_ca(ctx, ca)
    else:
        ctx = ssl.create_default_context(cafile=certifi.where())

    if not strict_ssl:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE

    if tls.cert:
        ctx.load_cert_chain(certfile=tls.cert, keyfile=tls.key)

    return ctx


class Agent(httpx.AsyncBaseTransport, ABC):
    """A pooled connection manager usable as an httpx transport.

    Agents are owned by the agent cache and shared between clients, so
    ``aclose`` leaves the pool open. Use :meth:`dispose` to close it.

    The pool and its SSL context are built on the first request, so bad TLS
    material fails that request and never the agent lookup.
    """
    kind: AgentKind

    def __init__(self, settings: AgentSettings) -> None:
        self.settings = settings
        self._inner: Optional[httpx.AsyncHTTPTransport] = None
        self._lock = threading.Lock()
        logger.debug(f"Created {self!r}")

    @abstractmethod
    def _create_transport(self) -> httpx.AsyncHTTPTransport:
        """Build the underlying connection pool."""
        pass

    @property
    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.settings.max_sockets,
            max_keepalive_connections=self.settings.max_sockets,
            keepalive_expiry=KEEPALIVE_EXPIRY,
        )

    @property
    def timeout(self) -> Optional[httpx.Timeout]:
        if not self.settings.timeout:
            return None
        return httpx.Timeout(self.settings.timeout / 1000)

    @property
    def transport(self) -> httpx.AsyncHTTPTransport:
        """The underlying pool, created on first access."""
        with self._lock:
            if self._inner is None:
                self._inner = self._create_transport()
                logger.debug(f"Opened connection pool for {self!r}")
            return self._inner

    def _verify(self):
        if not self.settings.secure:
            return True
        return build_ssl_context(self.settings.strict_ssl, self.settings.tls)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        timeout = self.timeout
        if timeout is not None:
            request.extensions["timeout"] = timeout.as_dict()
        return await self.transport.handle_async_request(request)

    async def aclose(self) -> None:
        logger.debug(f"Ignoring close of shared {self.kind.value} agent")

    async def dispose(self) -> None:
        with self._lock:
            inner, self._inner = self._inner, None
        if inner is not None:
            await inner.aclose()

    def __repr__(self) -> str:
        extra = ""
        if self.settings.proxy_url is not None:
            proxy_url = self.settings.proxy_url
            extra = f" proxy={proxy_url.scheme}://{proxy_url.host}:{proxy_url.port or ''}"
        return (
            f"<{type(self).__name__} secure={self.settings.secure} "
            f"max_sockets={self.settings.max_sockets} timeout={self.settings.timeout}{extra}>"
        )
