"""Shared fixtures: an isolated HOME, project directory and environment."""
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from cdktf_checkpoint.config import BASE_URL_ENV, DISABLE_ENV

# Variables any CI system on the runner might set; removed so tests see a clean host.
CI_ENV_VARS = [
    "CI", "CI_NAME", "GERRIT_PROJECT", "SYSTEM_TEAMFOUNDATIONCOLLECTIONURI",
    "BITRISE_IO", "BUDDY_WORKSPACE_ID", "BUILDKITE", "CIRRUS_CI", "GITLAB_CI",
    "APPVEYOR", "CIRCLECI", "SEMAPHORE", "DRONE", "DSARI", "GITHUB_ACTION",
    "TDDIUM", "SCREWDRIVER", "STRIDER", "TASK_ID", "RUN_ID", "JENKINS_URL",
    "BUILD_ID", "HUDSON_URL", "bamboo.buildKey", "GO_PIPELINE_NAME", "WERCKER",
    "NETLIFY", "NOW_GITHUB_DEPLOYMENT", "GITLAB_DEPLOYMENT", "BITBUCKET_DEPLOYMENT",
    "BITBUCKET_BUILD_NUMBER", "NOW_BUILDER", "VERCEL_GITHUB_DEPLOYMENT",
    "VERCEL_GITLAB_DEPLOYMENT", "VERCEL_BITBUCKET_DEPLOYMENT", "VERCEL_URL",
    "MAGNUM", "NEVERCODE", "RENDER", "SAIL_CI", "SHIPPABLE", "TEAMCITY_VERSION",
    "TRAVIS", "CODEBUILD_SRC_DIR", "NODE", "BUILDER_OUTPUT",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Fake HOME, cwd inside a scratch project, no CI and telemetry enabled."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    for name in CI_ENV_VARS + [DISABLE_ENV, BASE_URL_ENV, "CDKTF_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(project)
    return {"home": home, "project": project}


class _CheckpointHandler(BaseHTTPRequestHandler):
    # set per server in checkpoint_server()
    status = 200
    delay = 0.0
    requests: list = []

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.requests.append({
            "path": self.path,
            "headers": dict(self.headers),
            "body": body,
        })
        if self.delay:
            time.sleep(self.delay)
        try:
            self.send_response(self.status)
            self.send_header("Content-Type", "application/json")
            self.end_headers()
            self.wfile.write(b"{}")
        except OSError:
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def checkpoint_server():
    """Start a local checkpoint endpoint. Call with status/delay, get (base_url, requests)."""
    servers = []

    def start(status=200, delay=0.0):
        handler = type("Handler", (_CheckpointHandler,), {
            "status": status, "delay": delay, "requests": [],
        })
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}/v1/", handler.requests

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()
