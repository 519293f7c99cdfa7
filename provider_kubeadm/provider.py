"""Composition of the boot plan for one cluster input."""
import logging
from typing import Callable, List, Optional

from packaging.version import Version

from .domain.context import ClusterContext, create_cluster_context
from .domain.kubeadm import KubeadmConfig, select_kubeadm_config
from .models import BOOT_BEFORE, Cluster, NodeRole, Plan, Stage
from .stages import (
    get_init_stages,
    get_join_stages,
    get_pre_kubeadm_stages,
    mutate_init_configuration,
    mutate_join_configuration,
)
from .utils import get_mapping, redact_sensitive_data
from .utils.certs import get_cert_sans_revision, split_bootstrap_token
from .utils.defaults import mutate_cluster_defaults, mutate_kubelet_defaults
from .utils.kubelet import regenerate_kubelet_kubeadm_args
from .utils.version import probe_kubeadm_version

logger = logging.getLogger(__name__)

VersionProbe = Callable[[str], Version]

NODE_IP_ARG = "node-ip"


def prepare_configuration(ctx: ClusterContext, config: KubeadmConfig) -> None:
    """Default the configuration set and fill the late context fields.

    Raises:
        InvalidBootstrapTokenError: If the cluster token is not a bootstrap token
    """
    ctx.cluster_cidr = config.cluster_cidr
    ctx.service_cidr = config.service_cidr

    split_bootstrap_token(ctx.cluster_token)

    mutate_cluster_defaults(ctx.control_plane_host, config.cluster)
    mutate_kubelet_defaults(config.cluster, config.kubelet)

    if ctx.node_role == NodeRole.INIT.value:
        mutate_init_configuration(ctx, config)
        node_reg = get_mapping(config.init, "nodeRegistration")
    else:
        mutate_join_configuration(ctx, config)
        node_reg = get_mapping(config.join, "nodeRegistration")

    extra_args = config.kubelet_extra_args(node_reg)
    ctx.kubelet_args = regenerate_kubelet_kubeadm_args(
        node_reg, extra_args, ctx.node_role, config.pause_image()
    )
    ctx.cert_sans_revision = get_cert_sans_revision(config.cluster["apiServer"]["certSANs"])
    ctx.custom_node_ip = extra_args.get(NODE_IP_ARG, "")


def compose_stages(ctx: ClusterContext, config: KubeadmConfig) -> List[Stage]:
    """Return pre-stages followed by the role specific stages."""
    stages = get_pre_kubeadm_stages(ctx)
    if ctx.node_role == NodeRole.INIT.value:
        stages.extend(get_init_stages(ctx, config))
    else:
        stages.extend(get_join_stages(ctx, config))
    return stages


def cluster_provider(cluster: Cluster, version_probe: Optional[VersionProbe] = None) -> Plan:
    """Build the boot plan bringing this node into the cluster.

    Args:
        cluster: Cluster input handed over by the host
        version_probe: Returns the installed kubeadm version for a root path
            (default: run the installed kubeadm)

    Returns:
        Plan: The ``boot.before`` stages for this node

    Raises:
        KubeadmVersionError: If the kubeadm version cannot be determined
        InvalidBootstrapTokenError: If the cluster token is not a bootstrap token
    """
    logger.debug(f"Cluster input: {redact_sensitive_data(cluster.model_dump(by_alias=True))}")
    ctx = create_cluster_context(cluster)

    probe = version_probe or probe_kubeadm_version
    version = probe(ctx.root_path)
    config = select_kubeadm_config(version, ctx.user_options)

    prepare_configuration(ctx, config)
    ctx.freeze()

    stages = compose_stages(ctx, config)
    logger.info(f"Generated {len(stages)} stages for {ctx.node_role} node with kubeadm {version}")
    return Plan(stages={BOOT_BEFORE: stages})
