"""Report pipeline: fill defaults, serialize, POST once, log failures.

Nothing in here raises into the host command. Every failure while building,
serializing or sending a report ends up in the error sink and in
ReportResult.error.
"""
from __future__ import annotations

import logging
import platform
import sys
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from cdktf_checkpoint import __version__
from cdktf_checkpoint.config import PRODUCT, CheckpointSettings, is_disabled
from cdktf_checkpoint.errors import TransportError
from cdktf_checkpoint.log import logger as root_logger
from cdktf_checkpoint.log import process_logger_error
from cdktf_checkpoint.models import ReportRecord, ReportResult
from cdktf_checkpoint.telemetry.ci import CIDetector, detect_ci
from cdktf_checkpoint.telemetry.identity import FileIdentityStore, IdentityStore
from cdktf_checkpoint.telemetry.transport import post, telemetry_url

logger = logging.getLogger(__name__)

# platform.machine() -> the names the checkpoint service already receives
_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64",
}

_PLATFORM_PREFIXES = ("linux", "freebsd", "openbsd", "sunos", "aix")

Transport = Callable[..., None]
ErrorSink = Callable[[str], None]


def host_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def host_os() -> str:
    for prefix in _PLATFORM_PREFIXES:
        if sys.platform.startswith(prefix):
            return prefix
    return sys.platform


def fill_defaults(
    record: ReportRecord,
    identity: IdentityStore,
    ci_detector: CIDetector = detect_ci,
    now: datetime | None = None,
) -> ReportRecord:
    """Fill every missing field of ``record`` in place and return it.

    Fields already set are left alone. Under CI the record carries ``ci``
    and never ``user_id``.

    Raises:
        OSError: An identity file could not be written.
    """
    if not record.run_id:
        record.run_id = str(uuid.uuid4())
    if not record.date_time:
        record.date_time = now or datetime.now(timezone.utc)
    if not record.arch:
        record.arch = host_arch()
    if not record.os:
        record.os = host_os()

    ci = ci_detector()
    if ci:
        record.ci = ci
        record.user_id = None
    elif not record.user_id:
        record.user_id = identity.user_id()

    if not record.project_id:
        record.project_id = identity.project_id()
    return record


@dataclass
class CheckpointReporter:
    """Sends report records with injectable collaborators."""

    identity: IdentityStore = field(default_factory=FileIdentityStore)
    ci_detector: CIDetector = detect_ci
    transport: Transport = post
    on_error: ErrorSink = process_logger_error
    settings: CheckpointSettings = field(default_factory=CheckpointSettings.from_env)

    def report_request(self, record: ReportRecord) -> ReportResult:
        """Fill defaults and POST the record once.

        Returns immediately when CHECKPOINT_DISABLE is set. Failures are
        routed to ``on_error`` and reported in the result, never raised.
        """
        if is_disabled():
            logger.debug("Checkpoint disabled, not reporting %s", record.command)
            return ReportResult(skipped=True)

        try:
            fill_defaults(record, self.identity, self.ci_detector)
        except OSError as e:
            return self._failed(f"Could not persist telemetry identifier: {e}")
        except Exception as e:
            return self._failed(f"Could not build telemetry report: {e}")

        try:
            url = telemetry_url(record.product, self.settings.base_url)
            data = record.to_json()
        except (TypeError, ValueError) as e:
            return self._failed(f"Could not serialize telemetry report: {e}")

        try:
            self.transport(
                url,
                data,
                timeout=self.settings.timeout,
                user_agent=self.settings.user_agent,
            )
        except TransportError as e:
            return self._failed(str(e))
        except Exception as e:
            return self._failed(f"Could not send telemetry data: {e}")
        return ReportResult(delivered=True)

    def _failed(self, message: str) -> ReportResult:
        self.on_error(message)
        return ReportResult(error=message)

    def send_telemetry(self, command: str, payload: dict[str, Any]) -> ReportResult:
        """Report one CLI command invocation for the cdktf product."""
        try:
            record = ReportRecord(
                product=PRODUCT,
                command=command,
                version=__version__,
                date_time=datetime.now(timezone.utc),
                language=payload.get("language"),
                payload=payload,
            )
            return self.report_request(record)
        except Exception as e:
            root_logger.error(f"Could not send telemetry data: {e}")
            return ReportResult(error=str(e))


def report_request(record: ReportRecord, project_dir: str | None = None) -> ReportResult:
    """Send ``record`` with the default file-backed reporter."""
    reporter = CheckpointReporter(identity=FileIdentityStore(project_dir=project_dir))
    return reporter.report_request(record)


def send_telemetry(
    command: str,
    payload: dict[str, Any],
    project_dir: str | None = None,
) -> ReportResult:
    """Report a CLI command. Never raises."""
    reporter = CheckpointReporter(identity=FileIdentityStore(project_dir=project_dir))
    return reporter.send_telemetry(command, payload)
