"""Required defaults for the cluster and kubelet configuration objects.

Both functions mutate the given mappings in place. Defaulting is best-effort
and never fails: a field is only filled when the user left it unset.
"""
import ipaddress
import logging
from typing import Any, Dict

from ..domain import constants
from . import get_list, get_mapping, get_string, system
from .scheme import KUBELET_CONFIGURATION, KUBELET_V1BETA1

logger = logging.getLogger(__name__)


def _is_unset(value: Any) -> bool:
    return value is None or value == ""


def _set_default(obj: Dict[str, Any], key: str, value: Any) -> None:
    if _is_unset(obj.get(key)):
        obj[key] = value


def _child(obj: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return a nested mapping, creating it when absent or null."""
    value = obj.get(key)
    if not isinstance(value, dict):
        value = {}
        obj[key] = value
    return value


def get_dns_ip(service_cidr: str) -> str:
    """Return the tenth address of the first service subnet.

    Falls back to the default cluster DNS address when the subnet cannot be
    parsed or is too small.
    """
    first = (service_cidr or "").split(",")[0].strip()
    try:
        network = ipaddress.ip_network(first, strict=False)
        address = network.network_address + 10
    except ValueError as e:
        logger.debug(f"Using default cluster DNS, service subnet {first!r} unusable: {e}")
        return constants.DEFAULT_CLUSTER_DNS_IP
    if address not in network:
        return constants.DEFAULT_CLUSTER_DNS_IP
    return str(address)


def mutate_cluster_defaults(control_plane_host: str, cluster_cfg: Dict[str, Any]) -> None:
    """Point the cluster configuration at the control plane host.

    Args:
        control_plane_host: Host name or address of the control plane
        cluster_cfg: ClusterConfiguration mapping, mutated in place
    """
    api_server = _child(cluster_cfg, "apiServer")
    cert_sans = [san for san in get_list(api_server, "certSANs") if isinstance(san, str)]
    if control_plane_host not in cert_sans:
        cert_sans.append(control_plane_host)
    api_server["certSANs"] = cert_sans

    cluster_cfg["controlPlaneEndpoint"] = f"{control_plane_host}:{constants.API_SERVER_PORT}"
    _set_default(cluster_cfg, "imageRepository", constants.DEFAULT_IMAGE_REPOSITORY)


def mutate_kubelet_defaults(cluster_cfg: Dict[str, Any], kubelet_cfg: Dict[str, Any]) -> None:
    """Fill the kubelet configuration fields kubeadm expects to be set.

    Args:
        cluster_cfg: Defaulted ClusterConfiguration mapping
        kubelet_cfg: KubeletConfiguration mapping, mutated in place
    """
    kubelet_cfg["apiVersion"] = KUBELET_V1BETA1
    kubelet_cfg["kind"] = KUBELET_CONFIGURATION

    if kubelet_cfg.get("featureGates") is None:
        kubelet_cfg["featureGates"] = {}

    _set_default(kubelet_cfg, "staticPodPath", constants.DEFAULT_MANIFESTS_DIR)

    if kubelet_cfg.get("clusterDNS") is None:
        service_subnet = get_string(get_mapping(cluster_cfg, "networking"), "serviceSubnet")
        kubelet_cfg["clusterDNS"] = [get_dns_ip(service_subnet)]

    _set_default(kubelet_cfg, "clusterDomain", constants.DEFAULT_SERVICE_DNS_DOMAIN)

    authentication = _child(kubelet_cfg, "authentication")
    # Clients of the kubelet API need certificates signed by the cluster CA
    _set_default(_child(authentication, "x509"), "clientCAFile", constants.CA_CERT_PATH)
    _set_default(_child(authentication, "anonymous"), "enabled", False)
    _set_default(_child(authentication, "webhook"), "enabled", True)
    _set_default(_child(kubelet_cfg, "authorization"), "mode", "Webhook")

    # kubeadm polls the kubelet health endpoint on localhost
    _set_default(kubelet_cfg, "healthzBindAddress", "127.0.0.1")
    _set_default(kubelet_cfg, "healthzPort", constants.KUBELET_HEALTHZ_PORT)

    if kubelet_cfg.get("shutdownGracePeriod") in (None, "", "0s"):
        kubelet_cfg["shutdownGracePeriod"] = constants.SHUTDOWN_GRACE_PERIOD
    if kubelet_cfg.get("shutdownGracePeriodCriticalPods") in (None, "", "0s"):
        kubelet_cfg["shutdownGracePeriodCriticalPods"] = constants.SHUTDOWN_GRACE_PERIOD_CRITICAL_PODS

    kubelet_cfg["rotateCertificates"] = True

    _set_default(kubelet_cfg, "cgroupDriver", constants.CGROUP_DRIVER_SYSTEMD)

    if kubelet_cfg.get("resolvConf") is None and system.is_service_active("systemd-resolved"):
        kubelet_cfg["resolvConf"] = constants.SYSTEMD_RESOLVED_RESOLV_CONF
