"""Stages that run before any role specific kubeadm stage."""
import shlex
from typing import List

from ..domain import constants
from ..domain.context import ClusterContext
from ..models import Stage
from ..utils import root_join
from ..utils.stages import directory_present_guard, helper_script, shell_command
from .proxy import get_pre_kubeadm_proxy_stage

SWAP_OFF_FSTAB_COMMAND = r"sed -i '/ swap / s/^\(.*\)$/#\1/g' /etc/fstab"
SWAP_OFF_COMMAND = "swapoff -a"


def get_pre_kubeadm_command_stage(ctx: ClusterContext) -> Stage:
    return Stage(
        name="Run Pre Kubeadm Commands",
        commands=[
            shell_command("/bin/bash", helper_script(ctx, "kube-pre-init.sh"), ctx.root_path),
        ],
    )


def get_pre_kubeadm_swap_off_stage() -> Stage:
    return Stage(
        name="Run Pre Kubeadm Disable SwapOff",
        commands=[SWAP_OFF_FSTAB_COMMAND, SWAP_OFF_COMMAND],
    )


def _import_commands(ctx: ClusterContext, log_file: str, *args: str) -> List[str]:
    import_script = helper_script(ctx, "import.sh")
    # The redirect is shell syntax and stays unquoted
    return [
        shell_command("chmod", "+x", import_script),
        f"{shell_command('/bin/sh', import_script, *args)} > {shlex.quote(log_file)}",
    ]


def get_pre_kubeadm_load_images_stage(ctx: ClusterContext) -> Stage:
    return Stage(
        name="Run Load Kube Images",
        commands=_import_commands(
            ctx,
            constants.IMPORT_KUBE_IMAGES_LOG,
            root_join(ctx.root_path, constants.KUBE_IMAGES_PATH),
            ctx.root_path,
        ),
    )


def get_pre_kubeadm_import_local_images_stage(ctx: ClusterContext) -> Stage:
    """Build the local image import stage.

    The stage is always part of the plan; it only carries commands when local
    image import is requested.
    """
    stage = Stage(
        name="Run Import Local Images",
        if_=directory_present_guard(ctx.local_images_path),
    )
    if ctx.import_local_images:
        stage.commands = _import_commands(ctx, constants.IMPORT_LOG, ctx.local_images_path)
    return stage


def get_pre_kubeadm_stages(ctx: ClusterContext) -> List[Stage]:
    """Return the five pre-stages in execution order."""
    return [
        get_pre_kubeadm_proxy_stage(ctx),
        get_pre_kubeadm_command_stage(ctx),
        get_pre_kubeadm_swap_off_stage(),
        get_pre_kubeadm_load_images_stage(ctx),
        get_pre_kubeadm_import_local_images_stage(ctx),
    ]
