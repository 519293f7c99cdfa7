"""Proxy drop-ins for the kubelet and the container runtime.

Both files are rendered from Jinja2 templates in ``templates/`` with the
following context:
- proxy_configured: Boolean, True when HTTP_PROXY or HTTPS_PROXY is set
- http_proxy / https_proxy: Proxy URLs from the cluster environment
- no_proxy: Default no-proxy list extended with the user's NO_PROXY
"""
import logging
import os
import posixpath

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from ..domain import constants
from ..domain.context import ClusterContext
from ..errors import TemplateRenderError
from ..models import File, Stage
from ..utils.proxy import get_no_proxy_config, is_proxy_configured

logger = logging.getLogger(__name__)

KUBELET_PROXY_TEMPLATE = "kubelet-proxy.env.j2"
CONTAINERD_PROXY_TEMPLATE = "containerd-proxy.conf.j2"


def get_template_path() -> str:
    """Get the absolute path to the templates directory."""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def render_template(template_name: str, **context) -> str:
    """Render a proxy template.

    Raises:
        TemplateRenderError: If the template is missing or fails to render
    """
    env = Environment(
        loader=FileSystemLoader(get_template_path()),
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    try:
        return env.get_template(template_name).render(**context)
    except TemplateNotFound as e:
        raise TemplateRenderError(f"Proxy template not found: {e}") from e
    except TemplateSyntaxError as e:
        raise TemplateRenderError(f"Template syntax error: {e}") from e
    except UndefinedError as e:
        raise TemplateRenderError(f"Missing required template variable: {e}") from e


def _proxy_context(ctx: ClusterContext) -> dict:
    env = ctx.env_config or {}
    configured = is_proxy_configured(env)
    return {
        "proxy_configured": configured,
        "http_proxy": env.get("HTTP_PROXY", ""),
        "https_proxy": env.get("HTTPS_PROXY", ""),
        "no_proxy": get_no_proxy_config(ctx) if configured else "",
    }


def kubelet_proxy_env(ctx: ClusterContext) -> str:
    """Return the kubelet env file content, empty without a proxy."""
    return render_template(KUBELET_PROXY_TEMPLATE, **_proxy_context(ctx))


def containerd_proxy_env(ctx: ClusterContext) -> str:
    """Return the container runtime systemd drop-in, empty without a proxy."""
    return render_template(CONTAINERD_PROXY_TEMPLATE, **_proxy_context(ctx))


def get_containerd_proxy_path(ctx: ClusterContext) -> str:
    return posixpath.join(
        constants.RUN_SYSTEMD_SYSTEM_DIR,
        f"{ctx.containerd_service_folder_name}.service.d",
        constants.CONTAINERD_PROXY_FILE,
    )


def get_pre_kubeadm_proxy_stage(ctx: ClusterContext) -> Stage:
    """Build the stage writing both proxy files, with empty content when unset."""
    if is_proxy_configured(ctx.env_config):
        logger.info(f"Configuring kubelet and {ctx.containerd_service_folder_name} proxy settings")
    return Stage(
        name="Set proxy env",
        files=[
            File(
                path=constants.KUBELET_ENV_FILE,
                permissions=constants.PROXY_FILE_PERMISSIONS,
                content=kubelet_proxy_env(ctx),
            ),
            File(
                path=get_containerd_proxy_path(ctx),
                permissions=constants.PROXY_FILE_PERMISSIONS,
                content=containerd_proxy_env(ctx),
            ),
        ],
    )
