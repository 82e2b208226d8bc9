"""
Factories building proxy and direct agents from connection options.
"""
import logging
from typing import Callable, Mapping, Optional, Union

import httpx
from proxy_config import (
    ClientCertificate,
    ConnectionOptions,
    ResolvedProxy,
    TlsMaterial,
    pick_client_certificate,
    redact_url,
)

from .agents import (
    Agent,
    AgentKind,
    AgentSettings,
    DEFAULT_MAX_SOCKETS,
    SocksProxyAgent,
    agent_timeout,
    get_agent_class,
)

logger = logging.getLogger(__name__)

CertificateSelector = Callable[
    [Optional[Mapping[str, ClientCertificate]], Union[str, httpx.URL]],
    Optional[ClientCertificate],
]


def proxy_agent_kind(scheme: str) -> Optional[AgentKind]:
    """Map a proxy URL scheme to an agent kind, or None when unsupported."""
    if scheme == "http":
        return AgentKind.HTTP_PROXY
    if scheme == "https":
        return AgentKind.HTTPS_PROXY
    if scheme.startswith("socks") and SocksProxyAgent.supports(scheme):
        return AgentKind.SOCKS_PROXY
    return None


class ProxyAgentFactory:
    """Builds proxy agents for a resolved proxy URL."""

    def build(
        self,
        proxy: ResolvedProxy,
        is_https: bool,
        options: ConnectionOptions
    ) -> Optional[Agent]:
        """Build an agent for ``proxy``.

        Returns None for proxy schemes without an agent so that the caller
        can fall back to a direct connection.
        """
        kind = proxy_agent_kind(proxy.scheme)
        if kind is None:
            logger.warning(
                f"Unsupported proxy scheme '{proxy.scheme}' for {redact_url(proxy.url)}, "
                "falling back to a direct connection"
            )
            return None

        settings = AgentSettings(
            secure=is_https,
            max_sockets=options.max_sockets or DEFAULT_MAX_SOCKETS,
            timeout=agent_timeout(options.timeout),
            local_address=options.local_address,
            strict_ssl=options.strict_ssl if is_https else True,
            tls=TlsMaterial(ca=options.ca, cert=options.cert, key=options.key) if is_https else TlsMaterial(),
            proxy_url=proxy.url_without_auth,
            proxy_auth=proxy.auth_pair,
        )
        logger.debug(f"Building {kind.value} agent via {redact_url(proxy.url)}")
        return get_agent_class(kind)(settings)


class DirectAgentFactory:
    """Builds non-proxied keep-alive agents.

    Per-registry client certificates picked by ``certificate_selector``
    override the global ``ca``/``cert``/``key`` options field by field.
    """

    def __init__(self, certificate_selector: CertificateSelector = pick_client_certificate):
        self.certificate_selector = certificate_selector

    def resolve_tls(self, uri: Union[str, httpx.URL], options: ConnectionOptions) -> TlsMaterial:
        selected = self.certificate_selector(options.client_certificates, uri)
        if selected is None:
            return TlsMaterial(ca=options.ca, cert=options.cert, key=options.key)
        return TlsMaterial(
            ca=selected.ca if selected.ca is not None else options.ca,
            cert=selected.cert if selected.cert is not None else options.cert,
            key=selected.key if selected.key is not None else options.key,
        )

    def build(
        self,
        is_https: bool,
        options: ConnectionOptions,
        tls: Optional[TlsMaterial] = None
    ) -> Agent:
        """Build a direct agent; ``tls`` defaults to the global options."""
        if tls is None:
            tls = TlsMaterial(ca=options.ca, cert=options.cert, key=options.key)
        settings = AgentSettings(
            secure=is_https,
            max_sockets=options.max_sockets or DEFAULT_MAX_SOCKETS,
            timeout=agent_timeout(options.timeout),
            local_address=options.local_address,
            strict_ssl=options.strict_ssl if is_https else True,
            tls=tls if is_https else TlsMaterial(),
        )
        kind = AgentKind.HTTPS if is_https else AgentKind.HTTP
        return get_agent_class(kind)(settings)
