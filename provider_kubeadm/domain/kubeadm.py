"""The kubeadm configuration set in its two schema variants.

User options carry up to four sections, ``clusterConfiguration``,
``initConfiguration``, ``joinConfiguration`` and ``kubeletConfiguration``.
They are kept as plain mappings. The variants only differ in the shape of
kubelet extra arguments, the API group version they are tagged with and
whether the pause image is passed to the kubelet.
"""
import logging
import re
from typing import Any, Dict, List

import yaml
from packaging.version import Version

from ..utils.scheme import (
    CLUSTER_CONFIGURATION,
    INIT_CONFIGURATION,
    JOIN_CONFIGURATION,
    KUBEADM_V1BETA3,
    KUBEADM_V1BETA4,
    KUBELET_CONFIGURATION,
    KUBELET_V1BETA1,
    YAMLPrinter,
)
from ..utils import get_list, get_mapping, get_string
from ..utils.version import compare_to_schema_boundary
from . import constants

logger = logging.getLogger(__name__)

SECTION_KEYS = {
    CLUSTER_CONFIGURATION: "clusterConfiguration",
    INIT_CONFIGURATION: "initConfiguration",
    JOIN_CONFIGURATION: "joinConfiguration",
    KUBELET_CONFIGURATION: "kubeletConfiguration",
}

MINOR_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)")


def _load_sections(user_options: str) -> Dict[str, Any]:
    if not user_options:
        return {}
    try:
        document = yaml.safe_load(user_options)
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring malformed kubeadm options: {e}")
        return {}
    if not isinstance(document, dict):
        logger.debug("Ignoring kubeadm options that are not a mapping")
        return {}
    return document


class KubeadmConfig:
    """Cluster, init, join and kubelet configuration of one schema variant."""

    kubeadm_group_version: str = ""

    def __init__(
        self,
        cluster: Dict[str, Any] = None,
        init: Dict[str, Any] = None,
        join: Dict[str, Any] = None,
        kubelet: Dict[str, Any] = None,
    ):
        self.cluster = cluster if cluster is not None else {}
        self.init = init if init is not None else {}
        self.join = join if join is not None else {}
        self.kubelet = kubelet if kubelet is not None else {}

    @classmethod
    def parse(cls, user_options: str) -> "KubeadmConfig":
        """Build a configuration set from user options YAML.

        Malformed YAML and sections that are not mappings are ignored, so the
        result always holds the four sections.
        """
        document = _load_sections(user_options)
        sections = {}
        for kind, key in SECTION_KEYS.items():
            section = document.get(key)
            if section is not None and not isinstance(section, dict):
                logger.debug(f"Ignoring {key}, expected a mapping")
                section = None
            sections[kind] = section
        return cls(
            cluster=sections[CLUSTER_CONFIGURATION],
            init=sections[INIT_CONFIGURATION],
            join=sections[JOIN_CONFIGURATION],
            kubelet=sections[KUBELET_CONFIGURATION],
        )

    @property
    def group_versions(self) -> List[str]:
        return [self.kubeadm_group_version, KUBELET_V1BETA1]

    @property
    def networking(self) -> Dict[str, Any]:
        return get_mapping(self.cluster, "networking")

    @property
    def service_cidr(self) -> str:
        return get_string(self.networking, "serviceSubnet")

    @property
    def cluster_cidr(self) -> str:
        return get_string(self.networking, "podSubnet")

    def objects(self) -> Dict[str, Dict[str, Any]]:
        return {
            CLUSTER_CONFIGURATION: self.cluster,
            INIT_CONFIGURATION: self.init,
            JOIN_CONFIGURATION: self.join,
            KUBELET_CONFIGURATION: self.kubelet,
        }

    def render(self, *kinds: str) -> str:
        """Serialize the named sections, in order, as multi-document YAML."""
        objects = self.objects()
        printer = YAMLPrinter(self.group_versions)
        return printer.print_objects([(kind, objects.get(kind, {})) for kind in kinds])

    def kubelet_extra_args(self, node_reg: Dict[str, Any]) -> Dict[str, str]:
        """Return the kubelet extra arguments of a node registration as a mapping."""
        raise NotImplementedError

    def pause_image(self) -> str:
        """Return the pause image passed to the kubelet, empty to omit it."""
        return ""


class LegacyKubeadmConfig(KubeadmConfig):
    """kubeadm.k8s.io/v1beta3: extra arguments are a mapping."""

    kubeadm_group_version = KUBEADM_V1BETA3

    def kubelet_extra_args(self, node_reg: Dict[str, Any]) -> Dict[str, str]:
        args = get_mapping(node_reg, "kubeletExtraArgs")
        return {str(k): str(v) for k, v in args.items()}

    def pause_image(self) -> str:
        repository = self.cluster.get("imageRepository") or constants.DEFAULT_IMAGE_REPOSITORY
        return f"{repository}/pause:{get_pause_version(self.cluster.get('kubernetesVersion', ''))}"


class CurrentKubeadmConfig(KubeadmConfig):
    """kubeadm.k8s.io/v1beta4: extra arguments are a list of name/value records."""

    kubeadm_group_version = KUBEADM_V1BETA4

    def kubelet_extra_args(self, node_reg: Dict[str, Any]) -> Dict[str, str]:
        args = get_list(node_reg, "kubeletExtraArgs")
        # Later records win, as with repeated flags
        return {
            str(arg.get("name")): str(arg.get("value", ""))
            for arg in args
            if isinstance(arg, dict) and arg.get("name")
        }


def get_pause_version(kubernetes_version: str) -> str:
    """Look up the pause image tag for a Kubernetes version, empty when unknown."""
    match = MINOR_VERSION_PATTERN.match(str(kubernetes_version or ""))
    if not match:
        return ""
    return constants.PAUSE_VERSIONS.get(f"v{match.group(1)}.{match.group(2)}", "")


def select_kubeadm_config(version: Version, user_options: str) -> KubeadmConfig:
    """Parse user options with the schema variant matching the kubeadm version."""
    if compare_to_schema_boundary(version) < 0:
        config_class = LegacyKubeadmConfig
    else:
        config_class = CurrentKubeadmConfig
    logger.debug(f"Using {config_class.kubeadm_group_version} for kubeadm {version}")
    return config_class.parse(user_options)
