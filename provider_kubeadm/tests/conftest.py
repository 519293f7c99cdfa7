import logging

import pytest
from packaging.version import Version

from provider_kubeadm.config import Config
from provider_kubeadm.models import Cluster
from provider_kubeadm.utils import system

HOSTNAME = "node-1"
TOKEN = "abcdef.1234567890123456"


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Log to a per-test file and drop handlers afterwards."""
    monkeypatch.setattr(Config, "LOG_FILE", str(tmp_path / "provider-kubeadm.log"))
    yield
    logger = logging.getLogger("provider_kubeadm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def fake_host(monkeypatch):
    monkeypatch.setattr(system, "get_hostname", lambda: HOSTNAME)
    monkeypatch.setattr(system, "is_service_active", lambda name: False)


@pytest.fixture
def make_cluster():
    def _make(role="init", **overrides):
        data = {
            "role": role,
            "control_plane_host": "10.0.0.1",
            "cluster_token": TOKEN,
        }
        data.update(overrides)
        return Cluster(**data)
    return _make


def fixed_probe(version):
    def _probe(root_path):
        return Version(version)
    return _probe


@pytest.fixture
def legacy_probe():
    return fixed_probe("1.30.11")


@pytest.fixture
def current_probe():
    return fixed_probe("1.31.0")
