"""Kind registrations and the YAML printer for Kubernetes API objects."""
import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Set, Tuple

import yaml

from ..errors import UnregisteredKindError

logger = logging.getLogger(__name__)

KUBEADM_V1BETA3 = "kubeadm.k8s.io/v1beta3"
KUBEADM_V1BETA4 = "kubeadm.k8s.io/v1beta4"
KUBELET_V1BETA1 = "kubelet.config.k8s.io/v1beta1"

CLUSTER_CONFIGURATION = "ClusterConfiguration"
INIT_CONFIGURATION = "InitConfiguration"
JOIN_CONFIGURATION = "JoinConfiguration"
RESET_CONFIGURATION = "ResetConfiguration"
UPGRADE_CONFIGURATION = "UpgradeConfiguration"
KUBELET_CONFIGURATION = "KubeletConfiguration"

DOCUMENT_SEPARATOR = "---\n"


class Scheme:
    """Registry of the kinds known per API group version."""

    def __init__(self):
        self._kinds: Dict[str, Set[str]] = {}

    def add_known_types(self, group_version: str, *kinds: str) -> None:
        self._kinds.setdefault(group_version, set()).update(kinds)

    def recognizes(self, group_version: str, kind: str) -> bool:
        return kind in self._kinds.get(group_version, ())

    def group_version_for(self, kind: str, group_versions: Iterable[str]) -> str:
        """Return the first of ``group_versions`` that registers ``kind``.

        Raises:
            UnregisteredKindError: If none of them does
        """
        group_versions = list(group_versions)
        for group_version in group_versions:
            if self.recognizes(group_version, kind):
                return group_version
        raise UnregisteredKindError(kind, group_versions)


@lru_cache(maxsize=None)
def get_scheme() -> Scheme:
    """Return the process-wide scheme, built on first use."""
    scheme = Scheme()
    scheme.add_known_types(
        KUBEADM_V1BETA3,
        CLUSTER_CONFIGURATION,
        INIT_CONFIGURATION,
        JOIN_CONFIGURATION,
    )
    scheme.add_known_types(
        KUBEADM_V1BETA4,
        CLUSTER_CONFIGURATION,
        INIT_CONFIGURATION,
        JOIN_CONFIGURATION,
        RESET_CONFIGURATION,
        UPGRADE_CONFIGURATION,
    )
    scheme.add_known_types(KUBELET_V1BETA1, KUBELET_CONFIGURATION)
    logger.debug("Registered kubeadm and kubelet configuration kinds")
    return scheme


class YAMLPrinter:
    """Serializes API objects as tagged YAML documents.

    Args:
        group_versions: Group versions the printer may tag objects with,
            searched in order
        scheme: Kind registry (default: the process-wide scheme)
    """

    def __init__(self, group_versions: Iterable[str], scheme: Scheme = None):
        self.group_versions = tuple(group_versions)
        self.scheme = scheme or get_scheme()

    def print_object(self, kind: str, obj: Dict[str, Any]) -> str:
        document = dict(obj)
        document["apiVersion"] = self.scheme.group_version_for(kind, self.group_versions)
        document["kind"] = kind
        return yaml.safe_dump(document, default_flow_style=False, sort_keys=True)

    def print_objects(self, objects: List[Tuple[str, Dict[str, Any]]]) -> str:
        """Render ``(kind, object)`` pairs as one multi-document YAML blob."""
        return DOCUMENT_SEPARATOR.join(self.print_object(kind, obj) for kind, obj in objects)
