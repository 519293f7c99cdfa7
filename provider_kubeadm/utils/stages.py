"""Constructors for stages and the shell fragments they share."""
import shlex
from typing import List

from ..domain.constants import CONFIG_FILE_PERMISSIONS, HELPER_SCRIPT_PATH
from ..models import File, Stage
from . import root_join
from .proxy import get_no_proxy_config, is_proxy_configured


def make_file_stage(name: str, path: str, content: str) -> Stage:
    """Build a stage whose only effect is writing one file at mode 0640."""
    return Stage(
        name=name,
        files=[File(path=path, permissions=CONFIG_FILE_PERMISSIONS, content=content)],
    )


def helper_script(ctx, script: str) -> str:
    """Return the path of a helper script below the cluster root path."""
    return root_join(ctx.root_path, HELPER_SCRIPT_PATH, script)


def shell_command(*args: str) -> str:
    """Join arguments into a command line, quoting each one for the shell."""
    return " ".join(shlex.quote(str(arg)) for arg in args)


def file_absent_guard(path: str) -> str:
    return f"[ ! -f {shlex.quote(path)} ]"


def directory_present_guard(path: str) -> str:
    return f"[ -d {shlex.quote(path)} ]"


def proxy_args(ctx) -> List[str]:
    """Return the trailing helper script arguments that carry proxy settings.

    Empty when no proxy is configured.
    """
    env = ctx.env_config or {}
    if not is_proxy_configured(env):
        return []
    return [
        "true",
        env.get("HTTP_PROXY", ""),
        env.get("HTTPS_PROXY", ""),
        get_no_proxy_config(ctx),
    ]


def upgrade_command(ctx) -> str:
    return shell_command(
        "bash", helper_script(ctx, "kube-upgrade.sh"), ctx.node_role, ctx.root_path, *proxy_args(ctx)
    )


def reconfigure_command(ctx) -> str:
    """Return the reconfigure helper invocation for a frozen cluster context."""
    return shell_command(
        "bash",
        helper_script(ctx, "kube-reconfigure.sh"),
        ctx.node_role,
        ctx.cert_sans_revision,
        ctx.kubelet_args,
        ctx.root_path,
        ctx.custom_node_ip,
        *proxy_args(ctx),
    )
