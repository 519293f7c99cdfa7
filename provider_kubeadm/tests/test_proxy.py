from provider_kubeadm.domain.context import ClusterContext
from provider_kubeadm.utils.proxy import get_default_no_proxy, get_no_proxy_config, is_proxy_configured

SUFFIXES = ".svc,.svc.cluster,.svc.cluster.local"


def test_proxy_configured_predicate():
    assert is_proxy_configured({"HTTP_PROXY": "http://p:8080"})
    assert is_proxy_configured({"HTTPS_PROXY": "https://p:8443"})
    assert not is_proxy_configured({"NO_PROXY": "example.com"})
    assert not is_proxy_configured({})
    assert not is_proxy_configured(None)


def test_default_no_proxy_includes_cidrs():
    ctx = ClusterContext(cluster_cidr="192.168.0.0/16", service_cidr="10.96.0.0/12")
    assert get_default_no_proxy(ctx) == f"192.168.0.0/16,10.96.0.0/12,{SUFFIXES}"


def test_default_no_proxy_skips_empty_cidrs():
    assert get_default_no_proxy(ClusterContext()) == SUFFIXES
    assert get_default_no_proxy(ClusterContext(service_cidr="10.96.0.0/12")) == f"10.96.0.0/12,{SUFFIXES}"


def test_no_proxy_appends_user_value():
    ctx = ClusterContext(env_config={"NO_PROXY": "example.com"})
    assert get_no_proxy_config(ctx) == f"{SUFFIXES},example.com"


def test_no_proxy_without_user_value():
    ctx = ClusterContext(env_config={"HTTP_PROXY": "http://p:8080"})
    assert get_no_proxy_config(ctx) == SUFFIXES
