import json
import logging

import httpx
import pytest
from typer.testing import CliRunner

from realm_testkit.cli import app

runner = CliRunner()


def _write_config(tmp_path, key_file):
    path = tmp_path / "testkit.yaml"
    path.write_text(f"http_port: 9090\nadmin_key_file: {key_file}\n")
    return path


def test_show_config_defaults():
    result = runner.invoke(app, ["show-config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["http_port"] == 9080
    assert data["admin_path"] == "/__admin"


def test_show_config_from_file(tmp_path, admin_key_file):
    config = _write_config(tmp_path, admin_key_file)
    result = runner.invoke(app, ["show-config", "--config", str(config)])
    assert result.exit_code == 0
    assert json.loads(result.output)["http_port"] == 9090


def test_missing_config_file():
    result = runner.invoke(app, ["show-config", "--config", "nonexistent.yaml"])
    assert result.exit_code != 0


def test_delete_issues_request(tmp_path, admin_key_file, monkeypatch):
    calls = []

    async def fake_delete(config, token, realm_path, *, transport=None, logger=None):
        calls.append((config.http_port, token, realm_path))
        return httpx.Response(404)

    monkeypatch.setattr("realm_testkit.controller.delete_remote_realm", fake_delete)
    config = _write_config(tmp_path, admin_key_file)

    result = runner.invoke(
        app, ["delete", "people", "--prefix", "run-1", "--config", str(config)]
    )

    assert result.exit_code == 0
    assert calls == [(9090, "secret-token", "run-1/people")]
    assert "DELETE /api/realm/run-1/people: 404" in result.output


def test_delete_transport_error_exits_nonzero(tmp_path, admin_key_file, monkeypatch):
    async def refuse(config, token, realm_path, *, transport=None, logger=None):
        raise httpx.ConnectError("Connection refused")

    monkeypatch.setattr("realm_testkit.controller.delete_remote_realm", refuse)
    config = _write_config(tmp_path, admin_key_file)

    result = runner.invoke(
        app, ["delete", "people", "--prefix", "p", "--config", str(config)]
    )
    assert result.exit_code == 1


def test_delete_missing_key_file(tmp_path):
    config = _write_config(tmp_path, tmp_path / "missing.json")
    result = runner.invoke(app, ["delete", "x", "--prefix", "p", "--config", str(config)])
    assert result.exit_code == 1


def test_delete_malformed_key_file(tmp_path):
    key_file = tmp_path / "admin.json"
    key_file.write_text("{not json")
    config = _write_config(tmp_path, key_file)

    result = runner.invoke(app, ["delete", "x", "--prefix", "p", "--config", str(config)])

    assert result.exit_code == 1
    assert "invalid admin key file" in result.output
    assert isinstance(result.exception, SystemExit)


def test_delete_key_file_without_token(tmp_path):
    key_file = tmp_path / "admin.json"
    key_file.write_text(json.dumps({"token": "nope"}))
    config = _write_config(tmp_path, key_file)

    result = runner.invoke(app, ["delete", "x", "--prefix", "p", "--config", str(config)])

    assert result.exit_code == 1
    assert "ADMIN_TOKEN" in result.output


@pytest.mark.parametrize(
    "content",
    [
        "http_port: not-a-port\n",
        "unknown_field: 1\n",
        "http_port: [9080\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_exits_with_message(tmp_path, content):
    config = tmp_path / "testkit.yaml"
    config.write_text(content)

    result = runner.invoke(app, ["show-config", "--config", str(config)])

    assert result.exit_code == 1
    assert "Error: invalid config" in result.output


def test_config_with_unset_variable(tmp_path, monkeypatch):
    monkeypatch.delenv("ROS_CLI_UNSET", raising=False)
    config = tmp_path / "testkit.yaml"
    config.write_text("path_prefix: ${ROS_CLI_UNSET}\n")

    result = runner.invoke(app, ["show-config", "--config", str(config)])

    assert result.exit_code == 1
    assert "ROS_CLI_UNSET" in result.output


def test_delete_writes_debug_file(tmp_path, admin_key_file, monkeypatch):
    def handler(request):
        return httpx.Response(204)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = transport
        return real_client(*args, **kwargs)

    config = _write_config(tmp_path, admin_key_file)
    debug_file = tmp_path / "logs" / "delete.log"

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    result = runner.invoke(
        app,
        [
            "delete", "people", "--prefix", "run-1",
            "--config", str(config), "--debug-file", str(debug_file),
        ],
    )

    assert result.exit_code == 0, result.output
    text = debug_file.read_text()
    assert "DELETE http://localhost:9090/api/realm/run-1/people" in text
    assert "DELETE /api/realm/run-1/people -> 204" in text
    assert logging.getLogger("realm_testkit_cli").handlers == []
