"""
Agent dispatcher package.
"""
from .agents import (
    Agent,
    AgentKind,
    AgentSettings,
    KeepAliveAgent,
    HttpsKeepAliveAgent,
    HttpProxyAgent,
    HttpsProxyAgent,
    SocksProxyAgent,
    agent_timeout,
    register_agent_class,
    get_agent_class,
)
from .cache import AgentCache, DEFAULT_CACHE_CAPACITY
from .cache_key import direct_cache_key, proxy_cache_key
from .config import get_cache_capacity, load_connection_options
from .factory import DirectAgentFactory, ProxyAgentFactory, proxy_agent_kind
from .dispatcher import (
    AgentSelector,
    get_agent,
    get_default_selector,
    create_agent_selector,
)
from .request import fetch_with_timeout, DEFAULT_TIMEOUT_MS

__all__ = [
    "Agent",
    "AgentKind",
    "AgentSettings",
    "KeepAliveAgent",
    "HttpsKeepAliveAgent",
    "HttpProxyAgent",
    "HttpsProxyAgent",
    "SocksProxyAgent",
    "agent_timeout",
    "register_agent_class",
    "get_agent_class",
    "AgentCache",
    "DEFAULT_CACHE_CAPACITY",
    "direct_cache_key",
    "proxy_cache_key",
    "get_cache_capacity",
    "load_connection_options",
    "DirectAgentFactory",
    "ProxyAgentFactory",
    "proxy_agent_kind",
    "AgentSelector",
    "get_agent",
    "get_default_selector",
    "create_agent_selector",
    "fetch_with_timeout",
    "DEFAULT_TIMEOUT_MS",
]
