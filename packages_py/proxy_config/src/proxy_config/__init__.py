"""
Proxy configuration and resolution package.
"""
from .types import ConnectionOptions, ClientCertificate, ResolvedProxy, TlsMaterial
from .errors import ErrorKind, ProxyAgentError, InvalidProxyUrlError, AbortError
from .no_proxy import check_no_proxy, check_no_proxy_for_url
from .resolver import (
    resolve_proxy_url,
    resolve_proxy,
    parse_proxy_url,
    select_proxy_setting,
    redact_url,
)
from .certificates import pick_client_certificate, nerf_dart

__all__ = [
    "ConnectionOptions",
    "ClientCertificate",
    "ResolvedProxy",
    "TlsMaterial",
    "ErrorKind",
    "ProxyAgentError",
    "InvalidProxyUrlError",
    "AbortError",
    "check_no_proxy",
    "check_no_proxy_for_url",
    "resolve_proxy_url",
    "resolve_proxy",
    "parse_proxy_url",
    "select_proxy_setting",
    "redact_url",
    "pick_client_certificate",
    "nerf_dart",
]
