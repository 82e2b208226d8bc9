"""
Agent selection for outbound requests.
"""
import logging
import threading
from typing import Any, Mapping, Optional, Union

import httpx
from proxy_config import ConnectionOptions, check_no_proxy, pick_client_certificate, resolve_proxy

from .agents import Agent
from .cache import AgentCache
from .cache_key import direct_cache_key, proxy_cache_key
from .config import get_cache_capacity
from .factory import CertificateSelector, DirectAgentFactory, ProxyAgentFactory

logger = logging.getLogger(__name__)

OptionsInput = Optional[Union[ConnectionOptions, Mapping[str, Any]]]


def coerce_options(options: OptionsInput) -> ConnectionOptions:
    if options is None:
        return ConnectionOptions()
    if isinstance(options, ConnectionOptions):
        return options
    return ConnectionOptions.model_validate(dict(options))


class AgentSelector:
    """Resolves the agent for a target URL.

    Proxy agents and direct agents live in separate caches so they never
    share keys or capacity.
    """

    def __init__(
        self,
        direct_cache: Optional[AgentCache] = None,
        proxy_cache: Optional[AgentCache] = None,
        certificate_selector: CertificateSelector = pick_client_certificate,
        capacity: Optional[int] = None
    ):
        capacity = capacity or get_cache_capacity()
        self.direct_cache = direct_cache if direct_cache is not None else AgentCache(capacity, name="direct")
        self.proxy_cache = proxy_cache if proxy_cache is not None else AgentCache(capacity, name="proxy")
        self.direct_factory = DirectAgentFactory(certificate_selector)
        self.proxy_factory = ProxyAgentFactory()

    def get_agent(self, uri: Union[str, httpx.URL], options: OptionsInput = None) -> Agent:
        """Get the agent to use for ``uri``.

        Raises InvalidProxyUrlError when the applicable proxy URL is malformed.
        """
        opts = coerce_options(options)
        target = httpx.URL(uri)

        if opts.has_proxy and not check_no_proxy(target.host, opts.no_proxy):
            agent = self.get_proxy_agent(target, opts)
            if agent is not None:
                return agent

        return self.get_direct_agent(target, opts)

    def get_proxy_agent(self, uri: Union[str, httpx.URL], options: OptionsInput = None) -> Optional[Agent]:
        """Get the proxy agent for ``uri``, or None if no usable proxy applies."""
        opts = coerce_options(options)
        target = httpx.URL(uri)

        proxy = resolve_proxy(target, opts.http_proxy, opts.https_proxy)
        if proxy is None:
            return None

        is_https = target.scheme == "https"
        key = proxy_cache_key(is_https, proxy, opts)
        return self.proxy_cache.get_or_create(
            key, lambda: self.proxy_factory.build(proxy, is_https, opts)
        )

    def get_direct_agent(self, uri: Union[str, httpx.URL], options: OptionsInput = None) -> Agent:
        """Get the non-proxied agent for ``uri``."""
        opts = coerce_options(options)
        target = httpx.URL(uri)

        is_https = target.scheme == "https"
        tls = self.direct_factory.resolve_tls(target, opts)
        key = direct_cache_key(is_https, opts, tls)
        return self.direct_cache.get_or_create(
            key, lambda: self.direct_factory.build(is_https, opts, tls)
        )


_default_selector: Optional[AgentSelector] = None
_default_lock = threading.Lock()


def get_default_selector() -> AgentSelector:
    """Process-wide selector, created on first use."""
    global _default_selector
    with _default_lock:
        if _default_selector is None:
            _default_selector = AgentSelector()
            logger.debug(f"Created default agent selector with capacity {_default_selector.direct_cache.capacity}")
        return _default_selector


def get_agent(uri: Union[str, httpx.URL], options: OptionsInput = None) -> Agent:
    """Get the agent for ``uri`` using the default selector."""
    return get_default_selector().get_agent(uri, options)


def create_agent_selector(
    capacity: Optional[int] = None,
    certificate_selector: CertificateSelector = pick_client_certificate
) -> AgentSelector:
    """Create a new AgentSelector with its own caches."""
    return AgentSelector(capacity=capacity, certificate_selector=certificate_selector)
