"""
JSON over HTTP helper used to talk to the bookstore backend.

Requests are made with the standard library (``urllib``) and every
failure is turned into a :class:`BackendError` carrying a message that
can be shown to the shopper as is:

* the backend answered with a non-2xx status: the ``detail`` field of
  its JSON body when present, otherwise a generic message;
* the backend could not be reached (DNS, refused connection, timeout);
* the body of a successful answer is not valid JSON.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class BackendError(Exception):
    """A request to the backend failed.

    ``status`` is the HTTP status code when the backend answered, or
    ``None`` when no answer was received at all. ``detail`` is the message
    the backend itself sent with an error status, if any.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.detail = detail


def _error_detail(exc: urllib.error.HTTPError) -> Optional[str]:
    """Extract the ``detail`` message from an error response body."""
    try:
        body = exc.read().decode("utf-8", errors="ignore")
        data = json.loads(body) if body else None
    except (OSError, ValueError):
        return None
    if isinstance(data, dict) and data.get("detail"):
        detail = data["detail"]
        return detail if isinstance(detail, str) else json.dumps(detail)
    return None


def request_json(
    method: str,
    url: str,
    payload: Optional[Any] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Send a request and return the decoded JSON body.

    Parameters
    ----------
    method : str
        HTTP method, e.g. ``"GET"`` or ``"POST"``.
    url : str
        Absolute URL including any query string.
    payload : Optional[Any]
        JSON-serialisable request body. When ``None`` no body is sent.
    timeout : float
        Socket timeout in seconds.

    Raises
    ------
    BackendError
        On any transport error, non-2xx status or malformed body.
    """
    headers = {"Accept": "application/json"}
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"
    try:
        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8", errors="ignore")
    except urllib.error.HTTPError as exc:
        logger.warning("%s %s returned status %s", method, url, exc.code)
        detail = _error_detail(exc)
        raise BackendError(
            detail or f"Request failed with status {exc.code}",
            status=exc.code,
            detail=detail,
        ) from exc
    except (urllib.error.URLError, OSError, http.client.HTTPException) as exc:
        reason = getattr(exc, "reason", None) or exc
        logger.error("Error requesting %s %s: %s", method, url, reason)
        raise BackendError(f"Could not reach the bookstore service: {reason}") from exc
    except ValueError as exc:
        logger.error("Invalid request URL %s: %s", url, exc)
        raise BackendError(f"Invalid bookstore service address: {url}") from exc

    try:
        return json.loads(body)
    except ValueError as exc:
        logger.error("Malformed JSON from %s %s", method, url)
        raise BackendError("The bookstore service sent a malformed response") from exc
