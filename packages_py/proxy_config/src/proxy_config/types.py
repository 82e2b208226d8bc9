"""
Data models for connection options and resolved proxies.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClientCertificate(BaseModel):
    """Client TLS material for a single registry."""
    model_config = ConfigDict(frozen=True)

    cert: Optional[str] = Field(default=None, description="Path to client certificate")
    key: Optional[str] = Field(default=None, description="Path to client private key")
    ca: Optional[str] = Field(default=None, description="CA bundle path or PEM text")


class ConnectionOptions(BaseModel):
    """Options controlling which agent serves an outbound request.

    Accepts both snake_case names and the camelCase spelling used by
    npm-style configuration files (``httpsProxy``, ``noProxy``, ...).
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    http_proxy: Optional[str] = Field(default=None, description="Proxy for http: targets")
    https_proxy: Optional[str] = Field(default=None, description="Proxy for every other target scheme")
    no_proxy: Optional[Union[bool, str]] = Field(
        default=None,
        description="True to bypass all proxies, or comma separated host suffixes",
    )
    ca: Optional[Union[str, List[str]]] = Field(default=None, description="CA bundle path(s) or PEM text")
    cert: Optional[str] = Field(default=None, description="Path to client certificate")
    key: Optional[str] = Field(default=None, description="Path to client private key")
    strict_ssl: bool = Field(default=True, description="Verify the origin's TLS certificate")
    max_sockets: Optional[int] = Field(default=None, ge=1, description="Connection limit per agent")
    local_address: Optional[str] = Field(default=None, description="Local IP to bind outbound sockets to")
    timeout: Optional[int] = Field(default=None, ge=0, description="Milliseconds, 0 disables")
    client_certificates: Optional[Dict[str, ClientCertificate]] = Field(
        default=None,
        description="Registry URL prefix to client certificate",
    )

    @property
    def has_proxy(self) -> bool:
        return bool(self.http_proxy or self.https_proxy)


@dataclass(frozen=True)
class TlsMaterial:
    """TLS material resolved for one target."""
    ca: Optional[Union[str, List[str]]] = None
    cert: Optional[str] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class ResolvedProxy:
    """A parsed proxy URL with its decoded credentials."""
    url: httpx.URL
    raw: str

    @property
    def scheme(self) -> str:
        return self.url.scheme

    @property
    def host(self) -> str:
        return self.url.host

    @property
    def port(self) -> Optional[int]:
        return self.url.port

    @property
    def username(self) -> str:
        # httpx decodes userinfo components on access
        return self.url.username

    @property
    def password(self) -> Optional[str]:
        return self.url.password or None

    @property
    def auth_pair(self) -> Optional[Tuple[str, str]]:
        """Credentials in the ``(username, password)`` form httpx proxies take."""
        if not self.username:
            return None
        return (self.username, self.password or "")

    @property
    def url_without_auth(self) -> httpx.URL:
        return self.url.copy_with(username=None, password=None)
