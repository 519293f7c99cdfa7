import copy

import pytest

from provider_kubeadm.utils import defaults, system


def test_cluster_defaults_point_at_control_plane():
    cluster_cfg = {}
    defaults.mutate_cluster_defaults("10.0.0.1", cluster_cfg)

    assert cluster_cfg["apiServer"]["certSANs"] == ["10.0.0.1"]
    assert cluster_cfg["controlPlaneEndpoint"] == "10.0.0.1:6443"
    assert cluster_cfg["imageRepository"] == "registry.k8s.io"


def test_cluster_defaults_keep_user_values():
    cluster_cfg = {
        "apiServer": {"certSANs": ["cp.example.com"], "extraArgs": {"v": "2"}},
        "imageRepository": "mirror.example.com/k8s",
    }
    defaults.mutate_cluster_defaults("10.0.0.1", cluster_cfg)

    assert cluster_cfg["apiServer"]["certSANs"] == ["cp.example.com", "10.0.0.1"]
    assert cluster_cfg["apiServer"]["extraArgs"] == {"v": "2"}
    assert cluster_cfg["imageRepository"] == "mirror.example.com/k8s"


def test_cluster_defaults_are_idempotent():
    once = {"apiServer": {"certSANs": ["10.0.0.1"]}}
    defaults.mutate_cluster_defaults("10.0.0.1", once)
    twice = copy.deepcopy(once)
    defaults.mutate_cluster_defaults("10.0.0.1", twice)

    assert once == twice
    assert twice["apiServer"]["certSANs"] == ["10.0.0.1"]


def test_kubelet_defaults():
    kubelet_cfg = {}
    defaults.mutate_kubelet_defaults({"networking": {"serviceSubnet": "10.100.0.0/16"}}, kubelet_cfg)

    assert kubelet_cfg["apiVersion"] == "kubelet.config.k8s.io/v1beta1"
    assert kubelet_cfg["kind"] == "KubeletConfiguration"
    assert kubelet_cfg["featureGates"] == {}
    assert kubelet_cfg["staticPodPath"] == "/etc/kubernetes/manifests"
    assert kubelet_cfg["clusterDNS"] == ["10.100.0.10"]
    assert kubelet_cfg["clusterDomain"] == "cluster.local"
    assert kubelet_cfg["authentication"] == {
        "x509": {"clientCAFile": "/etc/kubernetes/pki/ca.crt"},
        "anonymous": {"enabled": False},
        "webhook": {"enabled": True},
    }
    assert kubelet_cfg["authorization"] == {"mode": "Webhook"}
    assert kubelet_cfg["healthzBindAddress"] == "127.0.0.1"
    assert kubelet_cfg["healthzPort"] == 10248
    assert kubelet_cfg["shutdownGracePeriod"] == "120s"
    assert kubelet_cfg["shutdownGracePeriodCriticalPods"] == "60s"
    assert kubelet_cfg["rotateCertificates"] is True
    assert kubelet_cfg["cgroupDriver"] == "systemd"
    assert "resolvConf" not in kubelet_cfg


def test_kubelet_defaults_keep_user_values():
    kubelet_cfg = {
        "clusterDNS": ["169.254.20.10"],
        "authentication": {"anonymous": {"enabled": True}},
        "cgroupDriver": "cgroupfs",
        "rotateCertificates": False,
        "shutdownGracePeriod": "30s",
    }
    defaults.mutate_kubelet_defaults({}, kubelet_cfg)

    assert kubelet_cfg["clusterDNS"] == ["169.254.20.10"]
    assert kubelet_cfg["authentication"]["anonymous"]["enabled"] is True
    assert kubelet_cfg["cgroupDriver"] == "cgroupfs"
    assert kubelet_cfg["shutdownGracePeriod"] == "30s"
    # Certificate rotation is not user overridable
    assert kubelet_cfg["rotateCertificates"] is True


def test_kubelet_uses_resolved_when_active(monkeypatch):
    monkeypatch.setattr(system, "is_service_active", lambda name: name == "systemd-resolved")
    kubelet_cfg = {}
    defaults.mutate_kubelet_defaults({}, kubelet_cfg)
    assert kubelet_cfg["resolvConf"] == "/run/systemd/resolve/resolv.conf"


@pytest.mark.parametrize("cidr,expected", [
    ("10.96.0.0/12", "10.96.0.10"),
    ("10.100.0.0/16,fd00::/108", "10.100.0.10"),
    ("fd00::/108", "fd00::a"),
    ("", "10.96.0.10"),
    ("not-a-cidr", "10.96.0.10"),
    ("10.0.0.0/30", "10.96.0.10"),
])
def test_get_dns_ip(cidr, expected):
    assert defaults.get_dns_ip(cidr) == expected
