"""
LRU cache of agents keyed by their effective connection settings.
"""
import logging
import threading
from collections import OrderedDict
from typing import Callable, List, Optional

from .agents import Agent

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CAPACITY = 50


class AgentCache:
    """Fixed-capacity least-recently-used store of agents.

    Lookup and build happen under one lock, so two threads asking for the
    same key never build two agents. Evicted agents are only dereferenced;
    their idle connections expire on their own.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY, name: str = "agents"):
        if capacity < 1:
            raise ValueError(f"AgentCache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.name = name
        self._entries: "OrderedDict[str, Agent]" = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get_or_create(self, key: str, build: Callable[[], Optional[Agent]]) -> Optional[Agent]:
        """Return the agent for ``key``, building and storing it on a miss.

        A ``None`` build result is returned without being stored.
        """
        with self._lock:
            agent = self._entries.get(key)
            if agent is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return agent

            self.misses += 1
            agent = build()
            if agent is None:
                return None

            self._entries[key] = agent
            logger.debug(f"[{self.name}] cached {agent!r} ({len(self._entries)}/{self.capacity})")
            while len(self._entries) > self.capacity:
                _, evicted = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"[{self.name}] evicted {evicted!r}")
            return agent

    def get(self, key: str) -> Optional[Agent]:
        """Look up ``key``, promoting it to most recently used."""
        with self._lock:
            agent = self._entries.get(key)
            if agent is not None:
                self._entries.move_to_end(key)
            return agent

    def peek(self, key: str) -> Optional[Agent]:
        """Look up ``key`` without touching recency."""
        with self._lock:
            return self._entries.get(key)

    def keys(self) -> List[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"<AgentCache {self.name} size={len(self)} capacity={self.capacity}>"
