"""Regeneration of the kubelet environment file line."""
import json
import logging
from typing import Any, Dict, List, Tuple

from ..domain import constants
from ..models import NodeRole
from . import get_list, get_string, system

logger = logging.getLogger(__name__)


def format_taint(taint: Dict[str, Any]) -> str:
    """Render a taint the way ``--register-with-taints`` expects it."""
    key = taint.get("key", "")
    value = taint.get("value") or ""
    effect = taint.get("effect") or ""
    if not effect:
        return f"{key}={value}:" if value else key
    if not value:
        return f"{key}:{effect}"
    return f"{key}={value}:{effect}"


def get_node_name_and_hostname(node_reg: Dict[str, Any], extra_args: Dict[str, str]) -> Tuple[str, str]:
    """Return the effective node name and the machine hostname.

    The node name is the registration ``name``, else an explicit
    ``hostname-override`` kubelet argument, else the hostname.
    """
    hostname = system.get_hostname()
    node_name = get_string(node_reg, "name") or extra_args.get("hostname-override") or hostname
    return node_name, hostname


def build_kubelet_arg_map(
    node_reg: Dict[str, Any],
    extra_args: Dict[str, str],
    node_role: str,
    pause_image: str = "",
) -> Dict[str, str]:
    """Build the base kubelet flags derived from node registration options."""
    flags = {
        "container-runtime-endpoint": get_string(node_reg, "criSocket") or constants.CRI_SOCKET_CONTAINERD,
    }

    if pause_image:
        flags["pod-infra-container-image"] = pause_image

    taints = [taint for taint in get_list(node_reg, "taints") if isinstance(taint, dict)]
    if node_role == NodeRole.WORKER.value and taints:
        flags["register-with-taints"] = ",".join(format_taint(t) for t in taints)

    node_name, hostname = get_node_name_and_hostname(node_reg, extra_args)
    if node_name != hostname:
        logger.debug(f"Setting kubelet hostname-override to {node_name}")
        flags["hostname-override"] = node_name

    return flags


def build_argument_list(base: Dict[str, str], overrides: Dict[str, str]) -> List[str]:
    """Merge flag maps, overrides winning, into a sorted ``--key=value`` list."""
    merged = dict(base)
    merged.update(overrides or {})
    return [f"--{key}={merged[key]}" for key in sorted(merged)]


def regenerate_kubelet_kubeadm_args(
    node_reg: Dict[str, Any],
    extra_args: Dict[str, str],
    node_role: str,
    pause_image: str = "",
) -> str:
    """Return the ``KUBELET_KUBEADM_ARGS="..."`` line for the kubelet env file.

    Args:
        node_reg: NodeRegistrationOptions mapping of the role's configuration
        extra_args: Kubelet extra arguments as a flat mapping
        node_role: Role of this node
        pause_image: Pause image reference, empty to omit the flag

    Returns:
        str: The env file assignment, flags sorted by name
    """
    base = build_kubelet_arg_map(node_reg or {}, extra_args or {}, node_role, pause_image)
    args = build_argument_list(base, extra_args)
    return f"{constants.KUBELET_ENV_FILE_VARIABLE}={json.dumps(' '.join(args), ensure_ascii=False)}"
