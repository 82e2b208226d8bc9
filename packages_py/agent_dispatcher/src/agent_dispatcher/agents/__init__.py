"""
Agent registry.
"""
import logging
from typing import Dict, Type

from .base import (
    Agent,
    AgentKind,
    AgentSettings,
    DEFAULT_MAX_SOCKETS,
    agent_timeout,
    build_ssl_context,
    keepalive_socket_options,
)
from .keepalive import KeepAliveAgent, HttpsKeepAliveAgent
from .proxy import HttpProxyAgent, HttpsProxyAgent, SocksProxyAgent

logger = logging.getLogger(__name__)

_agent_classes: Dict[AgentKind, Type[Agent]] = {}


def register_agent_class(agent_cls: Type[Agent]) -> None:
    """Register the class used to build agents of ``agent_cls.kind``."""
    _agent_classes[agent_cls.kind] = agent_cls
    logger.debug(f"Registered agent class for {agent_cls.kind.value}: {agent_cls.__name__}")


def get_agent_class(kind: AgentKind) -> Type[Agent]:
    """Get the agent class registered for a kind."""
    if kind not in _agent_classes:
        raise KeyError(f"No agent class registered for '{kind.value}'. Available: {[k.value for k in _agent_classes]}")
    return _agent_classes[kind]


# Register default agents
for _cls in (KeepAliveAgent, HttpsKeepAliveAgent, HttpProxyAgent, HttpsProxyAgent, SocksProxyAgent):
    register_agent_class(_cls)

__all__ = [
    "Agent",
    "AgentKind",
    "AgentSettings",
    "DEFAULT_MAX_SOCKETS",
    "agent_timeout",
    "build_ssl_context",
    "keepalive_socket_options",
    "KeepAliveAgent",
    "HttpsKeepAliveAgent",
    "HttpProxyAgent",
    "HttpsProxyAgent",
    "SocksProxyAgent",
    "register_agent_class",
    "get_agent_class",
]
