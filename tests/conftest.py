from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from buildconf.transport import Transport


def make_response(status_code: int = 200, body: Any = None, *, raw: bytes | None = None, url: str = "") -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = url
    r.encoding = "utf-8"
    if raw is not None:
        r._content = raw
    elif body is not None:
        r._content = json.dumps(body).encode("utf-8")
    else:
        r._content = b""
    return r


class FakeSession:
    """
    Stands in for `requests.Session`: records calls and replays queued results.

    A queued exception is raised instead of returning a response. Streamed
    request bodies are drained the way a real adapter would.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._queue: list[Any] = []

    def queue(self, *results: Any) -> None:
        self._queue.extend(results)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        call = {"method": method, "url": url, **kwargs}
        data = kwargs.get("data")
        if data is not None and hasattr(data, "read"):
            chunks = []
            while True:
                chunk = data.read(8192)
                if not chunk:
                    break
                chunks.append(chunk)
            call["sent"] = b"".join(chunks)
        self.calls.append(call)

        result = self._queue.pop(0)
        if isinstance(result, BaseException):
            raise result
        result.url = url
        return result


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def transport(session: FakeSession) -> Transport:
    return Transport("https://api.example.test/", "secret-token", timeout=5.0, session=session)
