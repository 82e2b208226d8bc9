"""
Direct (non-proxied) keep-alive agents.
"""
import httpx

from .base import Agent, AgentKind, keepalive_socket_options


class KeepAliveAgent(Agent):
    """Keep-alive pool for plain http targets."""
    kind = AgentKind.HTTP

    def _create_transport(self) -> httpx.AsyncHTTPTransport:
        return httpx.AsyncHTTPTransport(
            limits=self.limits,
            local_address=self.settings.local_address,
            socket_options=keepalive_socket_options(),
        )


class HttpsKeepAliveAgent(Agent):
    """Keep-alive pool for https targets, honoring strict_ssl and TLS material."""
    kind = AgentKind.HTTPS

    def _create_transport(self) -> httpx.AsyncHTTPTransport:
        return httpx.AsyncHTTPTransport(
            verify=self._verify(),
            limits=self.limits,
            local_address=self.settings.local_address,
            socket_options=keepalive_socket_options(),
        )
