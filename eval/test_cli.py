"""Tests for the cdktf-checkpoint command line."""
import json
import unittest.mock as mock

from click.testing import CliRunner

from cdktf_checkpoint import __version__
from cdktf_checkpoint.cli import cli
from cdktf_checkpoint.telemetry.identity import read_identifier


def _resp(status=200):
    resp = mock.MagicMock()
    resp.status = status
    resp.__enter__.return_value = resp
    return resp


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_send_posts_report(clean_env):
    runner = CliRunner()
    with mock.patch("urllib.request.urlopen", return_value=_resp(200)) as mock_open:
        result = runner.invoke(cli, [
            "send", "deploy", "--payload", '{"stacks": 2}', "--language", "go",
        ])

    assert result.exit_code == 0, result.output
    body = json.loads(mock_open.call_args.args[0].data)
    assert body["command"] == "deploy"
    assert body["language"] == "go"
    assert body["payload"] == {"stacks": 2, "language": "go"}


def test_send_exits_zero_when_endpoint_fails(clean_env):
    with mock.patch("urllib.request.urlopen", side_effect=TimeoutError("timed out")):
        result = CliRunner().invoke(cli, ["send", "deploy"])
    assert result.exit_code == 0


def test_send_disabled_makes_no_request(monkeypatch):
    monkeypatch.setenv("CHECKPOINT_DISABLE", "1")
    with mock.patch("urllib.request.urlopen") as mock_open:
        result = CliRunner().invoke(cli, ["send", "deploy"])
    assert result.exit_code == 0
    mock_open.assert_not_called()


def test_send_rejects_invalid_payload():
    result = CliRunner().invoke(cli, ["send", "deploy", "--payload", "{nope"])
    assert result.exit_code == 2
    assert "--payload" in result.output


def test_send_rejects_non_object_payload():
    result = CliRunner().invoke(cli, ["send", "deploy", "--payload", "[1, 2]"])
    assert result.exit_code == 2


def test_status_reports_disabled(monkeypatch):
    monkeypatch.setenv("CHECKPOINT_DISABLE", "1")
    result = CliRunner().invoke(cli, ["status"])
    assert result.exit_code == 0
    assert "disabled" in result.output


def test_status_does_not_create_identity_files(clean_env):
    result = CliRunner().invoke(cli, ["status"])

    assert result.exit_code == 0
    assert "enabled" in result.output
    assert "not detected" in result.output
    assert not (clean_env["project"] / "cdktf.json").exists()
    assert not (clean_env["home"] / ".cdktf").exists()


def test_status_shows_stored_ids_and_ci(clean_env, monkeypatch):
    with mock.patch("urllib.request.urlopen", return_value=_resp(200)):
        CliRunner().invoke(cli, ["send", "init"])
    project_id = read_identifier(str(clean_env["project"] / "cdktf.json"), "projectId")
    monkeypatch.setenv("GITHUB_ACTION", "run1")

    result = CliRunner().invoke(cli, ["status"])

    assert result.exit_code == 0
    assert project_id in result.output
    assert "github-actions" in result.output
