"""Shared fixtures: a scripted fake provider and a capturing log sink."""

import io
import threading
from contextlib import contextmanager
from typing import Optional

import pytest
from rich.console import Console

from bucketfinder.core.models import ProbeResponse
from bucketfinder.errors import ProbeError
from bucketfinder.utils.output import ScanLog


S3_NS = "http://s3.amazonaws.com/doc/2006-03-01/"


def listing_xml(name: str, keys: list[str]) -> bytes:
    contents = "".join(
        f"<Contents><Key>{key}</Key><LastModified>2024-01-01T00:00:00.000Z</LastModified>"
        f"<ETag>&quot;abc&quot;</ETag><Size>{len(key)}</Size></Contents>"
        for key in keys
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<ListBucketResult xmlns="{S3_NS}"><Name>{name}</Name><Prefix></Prefix>'
        f"<MaxKeys>1000</MaxKeys><IsTruncated>false</IsTruncated>{contents}</ListBucketResult>"
    ).encode()


def error_xml(code: str, message: str = "", endpoint: Optional[str] = None) -> bytes:
    extra = f"<Endpoint>{endpoint}</Endpoint>" if endpoint else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f"<Error><Code>{code}</Code><Message>{message}</Message>{extra}"
        f"<RequestId>1234</RequestId></Error>"
    ).encode()


NO_SUCH_BUCKET = (404, error_xml("NoSuchBucket", "The specified bucket does not exist"))


class FakeStream:
    def __init__(self, url: str, status_code: int, body: bytes, broken: bool):
        self.url = url
        self.status_code = status_code
        self._body = body
        self._broken = broken

    def iter_bytes(self):
        half = len(self._body) // 2
        yield self._body[:half]
        if self._broken:
            raise ProbeError(self.url, "connection reset")
        yield self._body[half:]


class FakeProvider:
    """
    Scripted stand-in for ProbeClient.

    ``pages`` maps URLs to (status, body); anything else gets ``default``.
    URLs in ``failing`` raise ProbeError, URLs in ``broken`` fail halfway
    through a streamed body.
    """

    def __init__(self, pages=None, default=NO_SUCH_BUCKET, failing=(), broken=()):
        self.pages = dict(pages or {})
        self.default = default
        self.failing = set(failing)
        self.broken = set(broken)
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self._lock = threading.Lock()

    def fetch(self, url: str, method: str = "GET") -> ProbeResponse:
        with self._lock:
            self.calls.append((method, url))
        if url in self.failing:
            raise ProbeError(url, "connection refused")
        status, body = self.pages.get(url, self.default)
        if method == "HEAD":
            body = b""
        return ProbeResponse(url=url, status_code=status, content=body)

    @contextmanager
    def stream(self, url: str):
        with self._lock:
            self.calls.append(("GET", url))
        if url in self.failing:
            raise ProbeError(url, "connection refused")
        status, body = self.pages.get(url, self.default)
        yield FakeStream(url, status, body, url in self.broken)

    def close(self) -> None:
        self.closed = True

    def urls(self, method: str = "GET") -> list[str]:
        return [url for m, url in self.calls if m == method]


class CapturedLog(ScanLog):
    """ScanLog writing the console side into a buffer."""

    def __init__(self, verbose: bool = False, log_file=None):
        self.buffer = io.StringIO()
        super().__init__(
            console=Console(file=self.buffer, width=500, color_system=None),
            log_file=log_file,
            verbose=verbose,
        )

    @property
    def lines(self) -> list[str]:
        return [line.strip() for line in self.buffer.getvalue().splitlines() if line.strip()]

    def matching(self, text: str) -> list[str]:
        return [line for line in self.lines if text in line]


@pytest.fixture
def log():
    sink = CapturedLog()
    yield sink
    sink.close()


@pytest.fixture
def verbose_log():
    sink = CapturedLog(verbose=True)
    yield sink
    sink.close()
