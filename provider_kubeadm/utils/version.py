"""Detection of the installed kubeadm version."""
import logging
import shutil
import subprocess

from packaging.version import InvalidVersion, Version

from ..config import Config
from ..errors import KubeadmVersionError
from . import root_join

logger = logging.getLogger(__name__)

# kubeadm.k8s.io/v1beta4 is the configuration API from this release on
SCHEMA_BOUNDARY = Version("1.31.0")


def get_kubeadm_binary_path(root_path: str) -> str:
    """Return the kubeadm binary to run.

    In agent mode the binary installed below the cluster root path is
    preferred; otherwise the host search path is used.
    """
    if root_path and root_path != "/":
        candidate = root_join(root_path, "usr/bin", "kubeadm")
        if shutil.which(candidate):
            return candidate
    return Config.KUBEADM_BINARY


def parse_kubeadm_version(raw: str) -> Version:
    """Parse ``kubeadm version -o short`` output such as ``v1.30.11``.

    Raises:
        KubeadmVersionError: If the output is not a version
    """
    text = (raw or "").strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return Version(text)
    except InvalidVersion as e:
        raise KubeadmVersionError(f"unable to parse kubeadm version {raw.strip()!r}") from e


def probe_kubeadm_version(root_path: str) -> Version:
    """Run the installed kubeadm and return its version.

    Raises:
        KubeadmVersionError: If kubeadm cannot be run or its output parsed
    """
    binary = get_kubeadm_binary_path(root_path)
    try:
        result = subprocess.run(
            [binary, "version", "-o", "short"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        output = getattr(e, "output", "") or ""
        raise KubeadmVersionError(
            f"error getting current kubeadm version: {e} {output.strip()}".strip()
        ) from e

    version = parse_kubeadm_version(result.stdout)
    logger.debug(f"Detected kubeadm {version} at {binary}")
    return version


def compare_to_schema_boundary(version: Version) -> int:
    """Three-way compare a kubeadm version with the schema boundary."""
    if version < SCHEMA_BOUNDARY:
        return -1
    if version > SCHEMA_BOUNDARY:
        return 1
    return 0
