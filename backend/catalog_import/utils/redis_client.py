"""Redis client factory shared by progress tracking and health checks."""

from __future__ import annotations

import ssl
from typing import Any

from redis import Redis

# Managed Redis providers that only accept TLS but hand out redis:// URLs
TLS_ONLY_HOSTS = (".upstash.io",)


def to_tls_url(url: str) -> str:
    if url.startswith("redis://") and any(host in url for host in TLS_ONLY_HOSTS):
        return url.replace("redis://", "rediss://", 1)
    return url


def create_redis_client(url: str, **kwargs: Any) -> Redis:
    """Create a client from a redis:// or rediss:// URL.

    TLS connections skip certificate verification, which managed providers
    with shared certificates require.
    """
    url = to_tls_url(url)
    if url.startswith("rediss://"):
        kwargs.setdefault("ssl_cert_reqs", ssl.CERT_NONE)
    return Redis.from_url(url, **kwargs)
