import pytest
import yaml

from provider_kubeadm.errors import UnregisteredKindError
from provider_kubeadm.utils.scheme import (
    KUBEADM_V1BETA3,
    KUBEADM_V1BETA4,
    KUBELET_V1BETA1,
    Scheme,
    YAMLPrinter,
    get_scheme,
)


def test_scheme_is_built_once():
    assert get_scheme() is get_scheme()


def test_scheme_registrations():
    scheme = get_scheme()
    assert scheme.recognizes(KUBEADM_V1BETA3, "InitConfiguration")
    assert scheme.recognizes(KUBEADM_V1BETA4, "UpgradeConfiguration")
    assert not scheme.recognizes(KUBEADM_V1BETA3, "UpgradeConfiguration")
    assert scheme.recognizes(KUBELET_V1BETA1, "KubeletConfiguration")


def test_printer_tags_and_separates_documents():
    printer = YAMLPrinter([KUBEADM_V1BETA4, KUBELET_V1BETA1])
    out = printer.print_objects([
        ("ClusterConfiguration", {"controlPlaneEndpoint": "10.0.0.1:6443"}),
        ("KubeletConfiguration", {"cgroupDriver": "systemd"}),
    ])

    documents = list(yaml.safe_load_all(out))
    assert documents == [
        {"apiVersion": KUBEADM_V1BETA4, "kind": "ClusterConfiguration", "controlPlaneEndpoint": "10.0.0.1:6443"},
        {"apiVersion": KUBELET_V1BETA1, "kind": "KubeletConfiguration", "cgroupDriver": "systemd"},
    ]
    assert "\n---\n" in out


def test_printer_overrides_user_tags():
    printer = YAMLPrinter([KUBEADM_V1BETA3])
    out = printer.print_object("InitConfiguration", {"apiVersion": "kubeadm.k8s.io/v1beta2", "kind": "Bogus"})
    assert yaml.safe_load(out) == {"apiVersion": KUBEADM_V1BETA3, "kind": "InitConfiguration"}


def test_printer_rejects_unregistered_kind():
    printer = YAMLPrinter([KUBEADM_V1BETA3, KUBELET_V1BETA1])
    with pytest.raises(UnregisteredKindError):
        printer.print_object("UpgradeConfiguration", {})


def test_private_scheme():
    scheme = Scheme()
    scheme.add_known_types("example.io/v1", "Widget")
    printer = YAMLPrinter(["example.io/v1"], scheme=scheme)
    assert "kind: Widget" in printer.print_object("Widget", {})
