"""
Proxy-flavored agents.

The http target vs https target distinction only controls whether origin TLS
settings are applied; the agent class is chosen by the proxy URL's scheme.
"""
import logging
import ssl

import certifi
import httpx

from .base import Agent, AgentKind

logger = logging.getLogger(__name__)


class _ProxyAgent(Agent):
    def _proxy(self) -> httpx.Proxy:
        return httpx.Proxy(url=self.settings.proxy_url, auth=self.settings.proxy_auth)

    def _create_transport(self) -> httpx.AsyncHTTPTransport:
        return httpx.AsyncHTTPTransport(
            verify=self._verify(),
            limits=self.limits,
            proxy=self._proxy(),
        )


class HttpProxyAgent(_ProxyAgent):
    """Talks plain HTTP to the proxy (absolute-form requests or CONNECT)."""
    kind = AgentKind.HTTP_PROXY


class HttpsProxyAgent(_ProxyAgent):
    """Talks TLS to the proxy itself before forwarding or tunneling."""
    kind = AgentKind.HTTPS_PROXY

    def _proxy(self) -> httpx.Proxy:
        return httpx.Proxy(
            url=self.settings.proxy_url,
            auth=self.settings.proxy_auth,
            ssl_context=ssl.create_default_context(cafile=certifi.where()),
        )


class SocksProxyAgent(_ProxyAgent):
    """Tunnels through a SOCKS5 proxy (requires the ``socksio`` package)."""
    kind = AgentKind.SOCKS_PROXY

    # socks4 variants are not implemented by the underlying pool
    SCHEME_ALIASES = {
        "socks": "socks5",
        "socks5": "socks5",
        "socks5h": "socks5h",
    }

    @classmethod
    def supports(cls, scheme: str) -> bool:
        return scheme in cls.SCHEME_ALIASES

    def _proxy(self) -> httpx.Proxy:
        url = self.settings.proxy_url
        scheme = self.SCHEME_ALIASES[url.scheme]
        if scheme != url.scheme:
            logger.debug(f"Treating '{url.scheme}' proxy scheme as '{scheme}'")
            url = url.copy_with(scheme=scheme)
        return httpx.Proxy(url=url, auth=self.settings.proxy_auth)
