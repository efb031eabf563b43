"""CI environment detection from well-known environment variables.

Checks run in order; the first match names the CI system. A row without a
name reports the matched value itself (CI_NAME).
"""
from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Any, Optional

CIDetector = Callable[[], Optional[str]]


def _has(*names: str) -> Callable[[Mapping[str, str]], bool]:
    return lambda env: all(env.get(n) for n in names)


def _equals(name: str, *values: str) -> Callable[[Mapping[str, str]], bool]:
    return lambda env: env.get(name) in values


def _value(name: str) -> Callable[[Mapping[str, str]], str | None]:
    return lambda env: env.get(name) or None


def _heroku_node(env: Mapping[str, str]) -> bool:
    # heroku sets nothing CI-specific, only a node binary in its own location
    return env.get("NODE", "").endswith("/.heroku/node/bin/node")


CI_SYSTEMS: list[tuple[str | None, Callable[[Mapping[str, str]], Any]]] = [
    ("gerrit", _has("GERRIT_PROJECT")),
    ("azure-pipelines", _has("SYSTEM_TEAMFOUNDATIONCOLLECTIONURI")),
    ("bitrise", _has("BITRISE_IO")),
    ("buddy", _has("BUDDY_WORKSPACE_ID")),
    ("buildkite", _has("BUILDKITE")),
    ("cirrus", _has("CIRRUS_CI")),
    ("gitlab", _has("GITLAB_CI")),
    ("appveyor", _has("APPVEYOR")),
    ("circle-ci", _has("CIRCLECI")),
    ("semaphore", _has("SEMAPHORE")),
    ("drone", _has("DRONE")),
    ("dsari", _has("DSARI")),
    ("github-actions", _has("GITHUB_ACTION")),
    ("tddium", _has("TDDIUM")),
    ("screwdriver", _has("SCREWDRIVER")),
    ("strider", _has("STRIDER")),
    ("taskcluster", _has("TASK_ID", "RUN_ID")),
    ("jenkins", _has("JENKINS_URL", "BUILD_ID")),
    ("hudson", _has("HUDSON_URL")),
    ("bamboo", _has("bamboo.buildKey")),
    ("gocd", _has("GO_PIPELINE_NAME")),
    ("wercker", _has("WERCKER")),
    ("netlify", _has("NETLIFY")),
    ("now-github", _has("NOW_GITHUB_DEPLOYMENT")),
    ("now-gitlab", _has("GITLAB_DEPLOYMENT")),
    ("now-bitbucket", _has("BITBUCKET_DEPLOYMENT")),
    ("bitbucket-pipelines", _has("BITBUCKET_BUILD_NUMBER")),
    ("now", _has("NOW_BUILDER")),
    ("vercel-github", _has("VERCEL_GITHUB_DEPLOYMENT")),
    ("vercel-gitlab", _has("VERCEL_GITLAB_DEPLOYMENT")),
    ("vercel-bitbucket", _has("VERCEL_BITBUCKET_DEPLOYMENT")),
    ("vercel", _has("VERCEL_URL")),
    ("magnum", _has("MAGNUM")),
    ("nevercode", _has("NEVERCODE")),
    ("render", _has("RENDER")),
    ("sail", _has("SAIL_CI")),
    ("shippable", _has("SHIPPABLE")),
    ("teamcity", _has("TEAMCITY_VERSION")),
    # codeship, sourcehut and others announce themselves by name
    (None, _value("CI_NAME")),
    ("heroku", _heroku_node),
    ("travis-ci", _has("TRAVIS")),
    ("aws-codebuild", _has("CODEBUILD_SRC_DIR")),
    ("custom", _equals("CI", "true", "1")),
    ("builder", _has("BUILDER_OUTPUT")),
]


def detect_ci(environ: Mapping[str, str] | None = None) -> str | None:
    """Return the name of the CI system we are running under, or None."""
    env = os.environ if environ is None else environ
    for name, matches in CI_SYSTEMS:
        hit = matches(env)
        if hit:
            return name or hit
    return None
