"""Stage builders for the boot plan."""
from .init import get_init_stages, mutate_init_configuration
from .join import get_join_stages, mutate_join_configuration
from .pre import get_pre_kubeadm_stages

__all__ = [
    "get_init_stages",
    "get_join_stages",
    "get_pre_kubeadm_stages",
    "mutate_init_configuration",
    "mutate_join_configuration",
]
