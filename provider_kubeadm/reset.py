"""Handling of the cluster reset bus event."""
import logging
import shlex
import subprocess

import yaml

from .domain.constants import HELPER_SCRIPT_PATH
from .domain.context import get_cluster_root_path
from .models import ClusterConfig, Event, EventResponse
from .utils import root_join

logger = logging.getLogger(__name__)

RESET_SCRIPT = "kube-reset.sh"


def get_reset_script_path(root_path: str) -> str:
    return root_join(root_path, HELPER_SCRIPT_PATH, RESET_SCRIPT)


def handle_cluster_reset(event: Event) -> EventResponse:
    """Run the reset helper for the cluster described by the event.

    A failing helper is reported through the response error together with its
    combined output; nothing is raised.
    """
    response = EventResponse()
    try:
        config = ClusterConfig.from_event_data(event.data)
    except (ValueError, yaml.YAMLError) as e:
        response.error = f"failed to parse cluster reset event: {e}"
        logger.error(response.error)
        return response

    if config.cluster is None:
        logger.info("Cluster reset event without cluster section, nothing to reset")
        return response

    script = get_reset_script_path(get_cluster_root_path(config.cluster.provider_options))
    logger.info(f"Resetting cluster with {script}")
    try:
        result = subprocess.run(
            ["/bin/sh", "-c", shlex.quote(script)],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        response.error = f"failed to reset cluster: {e}"
        logger.error(response.error)
        return response

    if result.returncode != 0:
        response.error = f"failed to reset cluster: {result.stdout}"
        logger.error(f"Cluster reset exited with status {result.returncode}")
    else:
        logger.info("Cluster reset completed")
    return response
