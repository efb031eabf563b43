"""One-way POST to the checkpoint endpoint. Exactly one attempt, no retries.

The response body is drained but never parsed; only the status code matters.
"""
from __future__ import annotations

import http.client
import logging
import socket
import urllib.error
import urllib.request

from cdktf_checkpoint.config import BASE_URL, TIMEOUT_SECONDS, USER_AGENT, VALID_STATUS_CODES
from cdktf_checkpoint.errors import TransportError, TransportTimeout

logger = logging.getLogger(__name__)


def telemetry_url(product: str, base_url: str = BASE_URL) -> str:
    """Endpoint for a product's reports, e.g. .../v1/telemetry/cdktf."""
    return f"{base_url}telemetry/{product}"


def _is_timeout(err: BaseException | None) -> bool:
    return isinstance(err, (socket.timeout, TimeoutError))


def post(
    url: str,
    data: str,
    timeout: float = TIMEOUT_SECONDS,
    user_agent: str = USER_AGENT,
) -> None:
    """POST a JSON document once.

    Raises:
        TransportTimeout: No response within ``timeout`` seconds.
        TransportError: Status outside VALID_STATUS_CODES, or a network fault.
    """
    body = data.encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "User-Agent": user_agent,
        },
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = resp.status
            if status not in VALID_STATUS_CODES:
                raise TransportError(resp.reason or f"HTTP {status}")
            resp.read()
    except urllib.error.HTTPError as e:
        # urllib raises for 4xx/5xx; the error doubles as the response
        e.close()
        raise TransportError(e.reason or f"HTTP {e.code}") from e
    except urllib.error.URLError as e:
        if _is_timeout(e.reason):
            raise TransportTimeout("request timeout") from e
        raise TransportError(str(e.reason)) from e
    except (socket.timeout, TimeoutError) as e:
        raise TransportTimeout("request timeout") from e
    except (http.client.HTTPException, OSError) as e:
        raise TransportError(str(e) or e.__class__.__name__) from e
    logger.debug("Checkpoint POST %s: HTTP %d", url, status)
