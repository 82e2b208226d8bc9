"""
Tests for AgentSelector.
"""
import httpx
import pytest
from agent_dispatcher import (
    AgentSelector,
    HttpProxyAgent,
    HttpsKeepAliveAgent,
    KeepAliveAgent,
    SocksProxyAgent,
    create_agent_selector,
    get_agent,
    get_default_selector,
)
from proxy_config import ConnectionOptions, InvalidProxyUrlError


@pytest.fixture
def selector():
    return AgentSelector(capacity=50)


class TestAgentSelector:

    def test_no_proxy_bypass_returns_direct(self, selector):
        """A bypassed host gets a direct agent even with a proxy configured."""
        agent = selector.get_agent(
            "https://registry.example.com/pkg",
            ConnectionOptions(https_proxy="http://proxy.local:8080", no_proxy="example.com"),
        )
        assert isinstance(agent, HttpsKeepAliveAgent)
        assert len(selector.proxy_cache) == 0

    def test_schemeless_http_proxy(self, selector):
        agent = selector.get_agent("http://foo.com", ConnectionOptions(http_proxy="proxy:3128"))
        assert isinstance(agent, HttpProxyAgent)
        assert agent.settings.proxy_url.scheme == "http"
        assert agent.settings.proxy_url.host == "proxy"
        assert agent.settings.proxy_url.port == 3128

    def test_socks_proxy(self, selector):
        agent = selector.get_agent("https://x", ConnectionOptions(https_proxy="socks5://s:1080"))
        assert isinstance(agent, SocksProxyAgent)

    def test_no_proxy_true(self, selector):
        agent = selector.get_agent("http://foo.com", ConnectionOptions(http_proxy="proxy:3128", no_proxy=True))
        assert isinstance(agent, KeepAliveAgent)

    def test_proxy_for_other_scheme_only(self, selector):
        """An https-only proxy leaves http targets direct."""
        agent = selector.get_agent("http://foo.com", ConnectionOptions(https_proxy="http://proxy:3128"))
        assert isinstance(agent, KeepAliveAgent)

    def test_unsupported_proxy_scheme_falls_back(self, selector):
        agent = selector.get_agent("https://x", ConnectionOptions(https_proxy="ftp://proxy:21"))
        assert isinstance(agent, HttpsKeepAliveAgent)
        assert len(selector.proxy_cache) == 0

    def test_invalid_proxy_raises(self, selector):
        with pytest.raises(InvalidProxyUrlError) as exc:
            selector.get_agent("https://x", ConnectionOptions(https_proxy="http://user:p@ss@proxy:8080"))
        assert exc.value.url == "http://user:p@ss@proxy:8080"

    def test_invalid_proxy_bypassed(self, selector):
        """A bypassed host never parses the proxy URL."""
        agent = selector.get_agent(
            "https://x.internal",
            ConnectionOptions(https_proxy="http://proxy:bad", no_proxy="internal"),
        )
        assert isinstance(agent, HttpsKeepAliveAgent)

    def test_same_options_same_agent(self, selector):
        options = ConnectionOptions(https_proxy="http://proxy:3128")
        first = selector.get_agent("https://a.example.com/x", options)
        second = selector.get_agent("https://b.example.com/y", options)
        assert first is second

    def test_cache_hit_keeps_original_pool_settings(self, selector):
        """maxSockets and timeout are not part of the key; the first agent wins."""
        first = selector.get_agent("https://registry.example.com/", ConnectionOptions(max_sockets=5, timeout=1000))
        second = selector.get_agent("https://registry.example.com/", ConnectionOptions(max_sockets=99, timeout=0))
        assert first is second
        assert second.settings.max_sockets == 5
        assert second.settings.timeout == 1001

    def test_proxy_cache_hit_keeps_original_pool_settings(self, selector):
        first = selector.get_agent("https://x", ConnectionOptions(https_proxy="http://p:1", timeout=10))
        second = selector.get_agent("https://x", ConnectionOptions(https_proxy="http://p:1", timeout=20))
        assert first is second
        assert second.settings.timeout == 11

    def test_tls_settings_split_agents(self, selector):
        strict = selector.get_agent("https://x", ConnectionOptions())
        lax = selector.get_agent("https://x", ConnectionOptions(strict_ssl=False))
        assert strict is not lax

    def test_http_and_https_split_agents(self, selector):
        assert selector.get_agent("http://x", None) is not selector.get_agent("https://x", None)

    def test_separate_caches(self, selector):
        selector.get_agent("https://x", ConnectionOptions(https_proxy="http://p:3128"))
        selector.get_agent("https://x", ConnectionOptions())
        assert len(selector.proxy_cache) == 1
        assert len(selector.direct_cache) == 1

    def test_mapping_options(self, selector):
        """Plain mappings with camelCase keys are accepted."""
        agent = selector.get_agent("https://x", {"httpsProxy": "socks5://s:1080"})
        assert isinstance(agent, SocksProxyAgent)

    def test_direct_cache_capacity(self, selector):
        """Past capacity the least recently used agent is evicted."""
        first = selector.get_agent("http://x", ConnectionOptions(local_address="10.0.0.0"))
        for i in range(1, 51):
            selector.get_agent("http://x", ConnectionOptions(local_address=f"10.0.0.{i}"))
        assert len(selector.direct_cache) == 50
        again = selector.get_agent("http://x", ConnectionOptions(local_address="10.0.0.0"))
        assert again is not first

    def test_registry_certificate_only_for_matching_host(self, selector):
        options = ConnectionOptions(client_certificates={
            "//registry.example.com/": {"ca": "-----BEGIN CERTIFICATE-----"},
        })
        other = selector.get_direct_agent("https://other.example.com/", options)
        assert other.settings.tls.ca is None
        assert len(selector.direct_cache) == 1


class TestDefaultSelector:
    def test_default_selector_is_shared(self):
        assert get_default_selector() is get_default_selector()

    def test_get_agent_uses_default_selector(self):
        first = get_agent("https://registry.example.com/")
        second = get_agent("https://registry.example.com/other")
        assert first is second

    def test_create_agent_selector_is_isolated(self):
        one = create_agent_selector(capacity=5)
        two = create_agent_selector(capacity=5)
        assert one.direct_cache is not two.direct_cache
        assert one.get_agent("https://x") is not two.get_agent("https://x")
        assert one.direct_cache.capacity == 5


class TestTlsMaterialErrors:
    """Unreadable TLS material never fails agent lookup, only the request."""

    @pytest.mark.parametrize("options", [
        ConnectionOptions(cert="/nonexistent/c.pem", key="/nonexistent/k.pem"),
        ConnectionOptions(ca="/nonexistent/ca.pem"),
    ])
    def test_get_agent_returns_agent(self, selector, options):
        agent = selector.get_agent("https://x.example.com/", options)
        assert isinstance(agent, HttpsKeepAliveAgent)
        assert selector.get_agent("https://x.example.com/", options) is agent

    def test_proxy_agent_with_missing_cert(self, selector):
        options = ConnectionOptions(https_proxy="http://proxy:3128", cert="/nonexistent/c.pem")
        assert isinstance(selector.get_agent("https://x.example.com/", options), HttpProxyAgent)

    @pytest.mark.asyncio
    async def test_request_surfaces_error(self, selector):
        agent = selector.get_agent("https://x.example.com/", ConnectionOptions(cert="/nonexistent/c.pem"))
        with pytest.raises(OSError):
            await agent.handle_async_request(httpx.Request("GET", "https://x.example.com/"))
