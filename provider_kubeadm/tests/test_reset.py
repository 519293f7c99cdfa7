import json
import stat

import pytest
import yaml

from provider_kubeadm.models import Event
from provider_kubeadm.reset import handle_cluster_reset


def write_reset_script(root, body):
    script = root / "opt" / "kubeadm" / "scripts" / "kube-reset.sh"
    script.parent.mkdir(parents=True)
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return script


def reset_event(root):
    config = yaml.safe_dump({
        "cluster": {
            "cluster_token": "abcdef.1234567890123456",
            "control_plane_host": "10.0.0.1",
            "role": "init",
            "provider_options": {"cluster_root_path": str(root)},
        }
    })
    return Event(name="cluster.reset", data=json.dumps({"config": config}))


def test_reset_succeeds(tmp_path):
    marker = tmp_path / "reset-ran"
    write_reset_script(tmp_path, f"touch {marker}\n")

    response = handle_cluster_reset(reset_event(tmp_path))

    assert response.error == ""
    assert marker.exists()


def test_reset_failure_reports_output(tmp_path):
    write_reset_script(tmp_path, "echo boom >&2\nexit 3\n")

    response = handle_cluster_reset(reset_event(tmp_path))

    assert "boom" in response.error


def test_reset_missing_script(tmp_path):
    response = handle_cluster_reset(reset_event(tmp_path))
    assert response.error.startswith("failed to reset cluster")


@pytest.mark.parametrize("data", ["not json", json.dumps({"config": "cluster: [unclosed"})])
def test_reset_malformed_payload(data):
    response = handle_cluster_reset(Event(name="cluster.reset", data=data))
    assert response.error.startswith("failed to parse cluster reset event")


def test_reset_without_cluster_section():
    response = handle_cluster_reset(Event(name="cluster.reset", data=json.dumps({"config": "other: 1"})))
    assert response.error == ""
