"""Reporter configuration: fixed endpoint constants plus environment overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass

PRODUCT = "cdktf"

BASE_URL = "https://checkpoint-api.hashicorp.com/v1/"
USER_AGENT = "HashiCorp/cdktf-cli"
VALID_STATUS_CODES = frozenset({200, 201})
TIMEOUT_SECONDS = 1.0

# Any non-empty value disables telemetry.
DISABLE_ENV = "CHECKPOINT_DISABLE"
BASE_URL_ENV = "CHECKPOINT_BASE_URL"


def is_disabled(environ=None) -> bool:
    """Return True if the checkpoint disable flag is set."""
    env = os.environ if environ is None else environ
    return bool(env.get(DISABLE_ENV))


@dataclass
class CheckpointSettings:
    """Where and how reports are sent."""

    base_url: str = BASE_URL
    timeout: float = TIMEOUT_SECONDS
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url.endswith("/"):
            self.base_url += "/"

    @classmethod
    def from_env(cls, environ=None) -> "CheckpointSettings":
        env = os.environ if environ is None else environ
        return cls(base_url=env.get(BASE_URL_ENV) or BASE_URL)
