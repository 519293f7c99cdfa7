"""Per-invocation cluster context built from the host's cluster input."""
import logging
from dataclasses import dataclass, field, fields
from typing import Dict

from ..errors import FrozenContextError
from ..models import Cluster
from ..utils import root_join
from ..utils.certs import transform_token
from . import constants

logger = logging.getLogger(__name__)


@dataclass
class ClusterContext:
    """Normalized input shared by every stage builder.

    Fields derived from the user configuration are filled by the plan
    composer, which then freezes the context before building stages.
    """
    root_path: str = constants.DEFAULT_ROOT_PATH
    node_role: str = ""
    control_plane_host: str = ""
    cluster_token: str = ""
    user_options: str = ""
    env_config: Dict[str, str] = field(default_factory=dict)
    containerd_service_folder_name: str = constants.CONTAINERD_SERVICE_FOLDER
    local_images_path: str = ""
    import_local_images: bool = False
    service_cidr: str = ""
    cluster_cidr: str = ""
    kubelet_args: str = ""
    cert_sans_revision: str = ""
    custom_node_ip: str = ""

    def __post_init__(self):
        object.__setattr__(self, "_frozen", False)

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise FrozenContextError(f"cluster context is frozen, cannot set {name}")
        super().__setattr__(name, value)

    def freeze(self) -> None:
        """Reject any further field writes."""
        object.__setattr__(self, "_frozen", True)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def get_cluster_root_path(provider_options: Dict[str, str]) -> str:
    """Return the cluster root path, "/" when the option is missing or empty."""
    root_path = (provider_options or {}).get(constants.CLUSTER_ROOT_PATH_OPTION, "")
    if not root_path or not root_path.strip("/"):
        return constants.DEFAULT_ROOT_PATH
    # Absolute, no trailing slash
    return "/" + root_path.strip("/")


def get_containerd_service_folder_name(provider_options: Dict[str, str]) -> str:
    """Select the container runtime unit folder from the provider options."""
    if constants.SPECTRO_CONTAINERD_OPTION in (provider_options or {}):
        return constants.SPECTRO_CONTAINERD_SERVICE_FOLDER
    return constants.CONTAINERD_SERVICE_FOLDER


def create_cluster_context(cluster: Cluster) -> ClusterContext:
    """Normalize the host's cluster input into a cluster context.

    The raw cluster token is replaced by its bootstrap token form and is not
    kept anywhere in the context.
    """
    root_path = get_cluster_root_path(cluster.provider_options)
    local_images_path = cluster.local_images_path or root_join(root_path, constants.LOCAL_IMAGES_PATH)

    ctx = ClusterContext(
        root_path=root_path,
        node_role=cluster.role.value,
        control_plane_host=cluster.control_plane_host,
        cluster_token=transform_token(cluster.cluster_token),
        user_options=cluster.options,
        env_config=cluster.env,
        containerd_service_folder_name=get_containerd_service_folder_name(cluster.provider_options),
        local_images_path=local_images_path,
        import_local_images=cluster.import_local_images,
    )
    logger.debug(f"Created cluster context for role {ctx.node_role} under {ctx.root_path}")
    return ctx
