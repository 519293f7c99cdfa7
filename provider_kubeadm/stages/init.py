"""Stages bringing up the first control plane node."""
import logging
from typing import List

from ..domain import constants
from ..domain.context import ClusterContext
from ..domain.kubeadm import KubeadmConfig
from ..models import Stage
from ..utils import get_mapping, root_join
from ..utils.certs import get_certificate_key, split_bootstrap_token
from ..utils.scheme import CLUSTER_CONFIGURATION, INIT_CONFIGURATION, KUBELET_CONFIGURATION
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


def mutate_init_configuration(ctx: ClusterContext, config: KubeadmConfig) -> None:
    """Seed the init configuration with the cluster bootstrap token.

    Raises:
        InvalidBootstrapTokenError: If the cluster token is not a bootstrap token
    """
    token_id, token_secret = split_bootstrap_token(ctx.cluster_token)
    init_cfg = config.init

    # A zero TTL never expires
    init_cfg["bootstrapTokens"] = [
        {"token": f"{token_id}.{token_secret}", "ttl": constants.BOOTSTRAP_TOKEN_TTL},
    ]
    init_cfg["certificateKey"] = get_certificate_key(ctx.cluster_token)

    endpoint = get_mapping(init_cfg, "localAPIEndpoint")
    local_api_endpoint = {
        "advertiseAddress": endpoint.get("advertiseAddress") or constants.DEFAULT_API_ADVERTISE_ADDRESS,
    }
    if endpoint.get("bindPort"):
        local_api_endpoint["bindPort"] = endpoint["bindPort"]
    init_cfg["localAPIEndpoint"] = local_api_endpoint


def get_kubeadm_init_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Kubeadm Init Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.KUBEADM_CONFIG_FILE),
        config.render(CLUSTER_CONFIGURATION, INIT_CONFIGURATION, KUBELET_CONFIGURATION),
    )


def get_kubeadm_init_stage(ctx: ClusterContext) -> Stage:
    sentinel = root_join(ctx.root_path, constants.KUBEADM_INIT_SENTINEL)
    return Stage(
        name="Run Kubeadm Init",
        if_=file_absent_guard(sentinel),
        commands=[
            shell_command("bash", helper_script(ctx, "kube-init.sh"), ctx.root_path, *proxy_args(ctx)),
            shell_command("touch", sentinel),
        ],
    )


def get_kubeadm_post_init_stage(ctx: ClusterContext) -> Stage:
    sentinel = root_join(ctx.root_path, constants.POST_KUBEADM_INIT_SENTINEL)
    return Stage(
        name="Run Post Kubeadm Init",
        if_=file_absent_guard(sentinel),
        commands=[
            shell_command("bash", helper_script(ctx, "kube-post-init.sh"), ctx.root_path),
            shell_command("touch", sentinel),
        ],
    )


def get_kubeadm_init_create_cluster_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Cluster Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.CLUSTER_CONFIG_FILE),
        config.render(CLUSTER_CONFIGURATION, INIT_CONFIGURATION),
    )


def get_kubeadm_init_upgrade_stage(ctx: ClusterContext) -> Stage:
    return Stage(name="Run Kubeadm Init Upgrade", commands=[upgrade_command(ctx)])


def get_kubeadm_init_create_kubelet_config_stage(ctx: ClusterContext, config: KubeadmConfig) -> Stage:
    return make_file_stage(
        "Generate Kubelet Config File",
        root_join(ctx.root_path, constants.CONFIGURATION_PATH, constants.KUBELET_CONFIG_FILE),
        config.render(KUBELET_CONFIGURATION),
    )


def get_kubeadm_init_reconfigure_stage(ctx: ClusterContext) -> Stage:
    return Stage(name="Run Kubeadm Reconfiguration", commands=[reconfigure_command(ctx)])


def get_init_stages(ctx: ClusterContext, config: KubeadmConfig) -> List[Stage]:
    """Return the init role stages in execution order.

    Args:
        ctx: Frozen cluster context
        config: Defaulted configuration set, init configuration already seeded
    """
    logger.debug(f"Building init stages under {ctx.root_path}")
    return [
        get_kubeadm_init_config_stage(ctx, config),
        get_kubeadm_init_stage(ctx),
        get_kubeadm_post_init_stage(ctx),
        get_kubeadm_init_create_cluster_config_stage(ctx, config),
        get_kubeadm_init_upgrade_stage(ctx),
        get_kubeadm_init_create_kubelet_config_stage(ctx, config),
        get_kubeadm_init_reconfigure_stage(ctx),
    ]
