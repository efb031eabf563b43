"""Telemetry subsystem.

INVARIANT: reporting never fails the host command. Every error raised while
building or sending a report is logged and swallowed at this boundary.

Set CHECKPOINT_DISABLE to any non-empty value to turn reporting off entirely.
"""
from cdktf_checkpoint.telemetry.checkpoint import (
    CheckpointReporter,
    fill_defaults,
    report_request,
    send_telemetry,
)

__all__ = [
    "CheckpointReporter",
    "fill_defaults",
    "report_request",
    "send_telemetry",
]
