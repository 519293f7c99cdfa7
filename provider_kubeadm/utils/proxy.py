"""No-proxy list composition for the kubelet and the container runtime."""
from typing import Dict

from ..domain.constants import K8S_NO_PROXY


def is_proxy_configured(env: Dict[str, str]) -> bool:
    """Return True when an HTTP or HTTPS proxy is set. NO_PROXY alone does not count."""
    env = env or {}
    return bool(env.get("HTTP_PROXY")) or bool(env.get("HTTPS_PROXY"))


def get_default_no_proxy(ctx) -> str:
    """Return the pod and service CIDRs followed by the in-cluster service suffixes."""
    parts = [cidr for cidr in (ctx.cluster_cidr, ctx.service_cidr) if cidr]
    parts.append(K8S_NO_PROXY)
    return ",".join(parts)


def get_no_proxy_config(ctx) -> str:
    """Return the default no-proxy list extended with the user's NO_PROXY."""
    no_proxy = get_default_no_proxy(ctx)
    user_no_proxy = (ctx.env_config or {}).get("NO_PROXY", "")
    if user_no_proxy:
        return f"{no_proxy},{user_no_proxy}"
    return no_proxy
