"""Stages joining a control plane or worker node to an existing cluster."""
import copy
import logging
from typing import List

from ..domain import constants
from ..domain.context import ClusterContext
from ..domain.kubeadm import KubeadmConfig
from ..models import NodeRole, Stage
from ..utils import get_mapping, root_join
from ..utils.certs import get_certificate_key
from ..utils.scheme import (
    CLUSTER_CONFIGURATION,
    INIT_CONFIGURATION,
    JOIN_CONFIGURATION,
    KUBELET_CONFIGURATION,
)
from ..utils.stages import (
    file_absent_guard,
    helper_script,
    make_file_stage,
    proxy_args,
    reconfigure_command,
    shell_command,
    upgrade_command,
)

logger = logging.getLogger(__name__)


def _is_control_plane(ctx: ClusterContext) -> bool:
    return ctx.node_role == NodeRole.CONTROL_PLANE.value


def mutate_join_configuration(ctx: ClusterContext, config: KubeadmConfig) -> None:
    """Point the join configuration at the control plane.

    Token discovery is only synthesized when the user did not configure one.
    Control plane nodes additionally get the certificate key used to fetch the
    shared control plane certificates.
    """
    join_cfg = config.join
    discovery = get_mapping(join_cfg, "discovery")
    if not get_mapping(discovery, "bootstrapToken"):
        discovery["bootstrapToken"] = {
            "token": ctx.cluster_token,
            "apiServerEndpoint": f"{ctx.control_plane_host}:{constants.API_SERVER_PORT}",
            "unsafeSkipCAVerification": True,
        }
    join_cfg["discovery"] = discovery

    if not _is_control_plane(ctx):
        return

    control_plane = get_mapping(join_cfg, "controlPlane")
    control_plane["certificateKey"] = get_certificate_key(ctx.cluster_token)

    endpoint = get_mapping(control_plane, "localAPIEndpoint")
    local_api_endpoint = {
        "advertiseAddress": endpoint.get("advertiseAddress") or constants.DEFAULT_API_ADVERTISE_ADDRESS,
    }
    if endpoint.get("bindPort"):
        local_api_endpoint["bindPort"] = endpoint["bindPort"]
    control_plane["localAPIEndpoint"] = local_api_endpoint
    join_cfg["controlPlane"] = control_plane


def get_kubeadm_join_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Kubeadm Join Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.KUBEADM_CONFIG_FILE),
        config.render(JOIN_CONFIGURATION),
    )


def get_kubeadm_join_stage(ctx: ClusterContext) -> Stage:
    sentinel = root_join(ctx.root_path, constants.KUBEADM_JOIN_SENTINEL)
    return Stage(
        name="Run Kubeadm Join",
        if_=file_absent_guard(sentinel),
        commands=[
            shell_command(
                "bash", helper_script(ctx, "kube-join.sh"), ctx.node_role, ctx.root_path, *proxy_args(ctx)
            ),
            shell_command("touch", sentinel),
        ],
    )


def get_kubeadm_join_upgrade_stage(ctx: ClusterContext) -> Stage:
    return Stage(name="Run Kubeadm Join Upgrade", commands=[upgrade_command(ctx)])


def get_join_cluster_config(config: KubeadmConfig) -> str:
    """Render cluster, init and join documents for a joining control plane.

    The init document advertises the same local API endpoint as the join
    control plane section.
    """
    init_cfg = copy.deepcopy(config.init)
    control_plane = get_mapping(config.join, "controlPlane")
    if get_mapping(control_plane, "localAPIEndpoint"):
        init_cfg["localAPIEndpoint"] = copy.deepcopy(control_plane["localAPIEndpoint"])

    snapshot = type(config)(
        cluster=config.cluster,
        init=init_cfg,
        join=config.join,
        kubelet=config.kubelet,
    )
    return snapshot.render(CLUSTER_CONFIGURATION, INIT_CONFIGURATION, JOIN_CONFIGURATION)


def get_kubeadm_join_create_cluster_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Cluster Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.CLUSTER_CONFIG_FILE),
        get_join_cluster_config(config),
    )


def get_kubeadm_join_create_kubelet_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Kubelet Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.KUBELET_CONFIG_FILE),
        config.render(KUBELET_CONFIGURATION),
    )


def get_kubeadm_join_reconfigure_stage(ctx: ClusterContext) -> Stage:
    return Stage(name="Run Kubeadm Join Reconfiguration", commands=[reconfigure_command(ctx)])


def get_join_stages(ctx: ClusterContext, config: KubeadmConfig) -> List[Stage]:
    """Return the join stages in execution order.

    Workers skip the cluster and kubelet config snapshots.

    Args:
        ctx: Frozen cluster context
        config: Defaulted configuration set, join configuration already seeded
    """
    logger.debug(f"Building {ctx.node_role} join stages under {ctx.root_path}")
    stages = [
        get_kubeadm_join_config_stage(ctx, config),
        get_kubeadm_join_stage(ctx),
        get_kubeadm_join_upgrade_stage(ctx),
    ]
    if _is_control_plane(ctx):
        stages.append(get_kubeadm_join_create_cluster_config_stage(ctx, config))
        stages.append(get_kubeadm_join_create_kubelet_config_stage(ctx, config))
    stages.append(get_kubeadm_join_reconfigure_stage(ctx))
    return stages
