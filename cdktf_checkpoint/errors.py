# --- Checkpoint ---


class CheckpointError(Exception):
    """Base class for telemetry reporting errors."""


# --- Transport ---


class TransportError(CheckpointError):
    """Raised when the checkpoint endpoint rejects a report or cannot be reached."""


class TransportTimeout(TransportError):
    """Raised when no response arrives within the request timeout."""
