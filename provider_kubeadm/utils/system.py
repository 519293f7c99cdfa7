"""Thin wrappers around host lookups used while defaulting."""
import logging
import shutil
import socket
import subprocess

logger = logging.getLogger(__name__)


def get_hostname() -> str:
    """Return the machine hostname the way the kubelet registers it."""
    return socket.gethostname().strip().lower()


def is_service_active(name: str) -> bool:
    """Check whether a systemd unit is active.

    Any failure to ask systemd is treated as inactive.
    """
    systemctl = shutil.which("systemctl")
    if not systemctl:
        logger.debug(f"systemctl not found, treating {name} as inactive")
        return False
    try:
        result = subprocess.run(
            [systemctl, "is-active", "--quiet", name],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Unable to query systemd for {name}: {e}")
        return False
    return result.returncode == 0
