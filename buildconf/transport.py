"""
transport.py

Responsibility: Isolate all direct HTTP interaction with the build-configuration API.

This module must be the only place that:
- Sends HTTP requests (via `requests`)
- Interprets non-success statuses / error payloads
- Decodes JSON response bodies
- Streams template payloads to pre-signed upload paths

It knows nothing about build configurations; `client.py` maps operations onto it.
"""

from __future__ import annotations

import logging
from typing import IO, Any, Iterator

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "buildconf"
TOKEN_HEADER = "X-Atlas-Token"

_CHUNK_SIZE = 64 * 1024


class BuildConfigError(RuntimeError):
    pass


class TransportError(BuildConfigError):
    """The request could not be made (connection, DNS, timeout, IO)."""


class APIError(BuildConfigError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, *, method: str = "", path: str = "") -> None:
        self.status_code = status_code
        self.message = message
        self.method = method
        self.path = path
        super().__init__(f"API error {status_code} {method} {path}: {message}")


class DecodeError(BuildConfigError):
    """
    A JSON document does not parse or does not have the expected shape.

    Covers API response bodies and local templates read to derive builds.
    """


class UploadError(BuildConfigError):
    """
    The template payload could not be uploaded.

    Raised after the version record was already created server-side, so the
    caller can tell that an orphaned version now exists.
    """

    def __init__(self, upload_path: str, message: str, *, status_code: int | None = None) -> None:
        self.upload_path = upload_path
        self.status_code = status_code
        super().__init__(f"Upload to {upload_path} failed: {message}")


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _error_message(response: requests.Response) -> str:
    """
    Pull a human-readable message out of an error response.

    The API reports errors as {"errors": [...]}; other servers commonly use
    "message" or "error". Falls back to the raw body.
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason or ""
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(e) for e in errors)
        for key in ("message", "error"):
            if payload.get(key):
                return str(payload[key])
    return str(payload)


class _SizedReader:
    """
    Read-only view over a caller-owned stream that yields at most `size` bytes.

    `requests` sets Content-Length from `len()` and streams via `read()`, so the
    underlying stream is consumed chunk by chunk and never closed here. A stream
    that runs dry early aborts the transfer while it is being sent; the server
    would otherwise wait for the promised bytes until the request times out.
    """

    def __init__(self, url: str, stream: IO[bytes], size: int) -> None:
        self._url = url
        self._stream = stream
        self._size = size
        self._remaining = size
        self.sent = 0

    def __len__(self) -> int:
        return self._remaining

    def read(self, n: int = -1) -> bytes:
        if self._remaining <= 0:
            return b""
        if n is None or n < 0 or n > self._remaining:
            n = min(self._remaining, _CHUNK_SIZE)
        data = self._stream.read(n)
        if not data:
            raise UploadError(self._url, f"payload ended after {self.sent} of {self._size} bytes")
        self._remaining -= len(data)
        self.sent += len(data)
        return data

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read(_CHUNK_SIZE)
            if not chunk:
                return
            yield chunk


class Transport:
    """
    Authenticated HTTP transport shared by any number of client calls.

    Timeouts are applied per request; there is no retry policy.
    """

    def __init__(
        self,
        address: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._address = address.rstrip("/")
        self._token = token or None
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

    @property
    def address(self) -> str:
        return self._address

    def _headers(self, *, has_body: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        if self._token:
            headers[TOKEN_HEADER] = self._token
        return headers

    def request(self, method: str, path: str, *, json_body: Any = None) -> requests.Response:
        """
        Send a single request and return the response if its status is 2xx.
        """
        url = f"{self._address}{path}"
        logger.debug("%s %s", method, path)
        try:
            r = self._session.request(
                method,
                url,
                headers=self._headers(has_body=json_body is not None),
                json=json_body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, r.status_code)
        if not _is_success(r.status_code):
            raise APIError(r.status_code, _error_message(r), method=method, path=path)
        return r

    def decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {response.url} is not valid JSON: {e}") from e

    def put_file(self, url: str, payload: IO[bytes], size: int) -> None:
        """
        Stream exactly `size` bytes from `payload` to the pre-signed `url`.

        The stream stays open; its lifetime belongs to the caller.
        """
        reader = _SizedReader(url, payload, size)
        logger.debug("PUT %s (%d bytes)", url, size)
        try:
            r = self._session.request(
                "PUT",
                url,
                data=reader,
                headers={"Content-Length": str(size), "User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise UploadError(url, str(e)) from e

        logger.debug("PUT %s -> %s", url, r.status_code)
        if not _is_success(r.status_code):
            raise UploadError(url, f"status {r.status_code}: {_error_message(r)}", status_code=r.status_code)
