"""
Upstream client — fetches the books table from the third-party API.
The bearer credential is attached here and nowhere else; it must never
show up in a log line or an exception message.
"""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

_REDACTED = "***"


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity, which JSONResponse can't render back
    raise ValueError(f"non-standard JSON constant {name!r}")


class UpstreamError(Exception):
    """The upstream call failed: transport error, timeout, non-2xx or bad body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamClient:
    def __init__(self, url: str, api_key: str, timeout: float = 10.0) -> None:
        self._url = url
        self._key = api_key
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def _redact(self, text: str) -> str:
        if not self._key:
            return text
        return text.replace(self._key, _REDACTED)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._key}"}

    # ── Fetch ──────────────────────────────────────────────────────────────

    def fetch(self) -> Any:
        """
        Single GET against the upstream URL. No retries: a failure is
        raised immediately as UpstreamError and the caller decides.
        """
        status_code: Optional[int] = None
        try:
            resp = requests.get(self._url, headers=self._headers(), timeout=self._timeout)
            status_code = resp.status_code
            resp.raise_for_status()
            return resp.json(parse_constant=_reject_constant)
        except requests.Timeout as e:
            message = f"Upstream request to {self._url} timed out after {self._timeout}s: {e}"
        except requests.HTTPError as e:
            message = f"Upstream request to {self._url} returned HTTP {status_code}: {e}"
        except requests.JSONDecodeError as e:
            message = f"Upstream response from {self._url} was not valid JSON: {e}"
        except requests.RequestException as e:
            message = f"Upstream request to {self._url} failed: {e}"
        except ValueError as e:
            # raised by _reject_constant
            message = f"Upstream response from {self._url} was not valid JSON: {e}"

        message = self._redact(message)
        logger.error(message)
        raise UpstreamError(message, status_code=status_code)
