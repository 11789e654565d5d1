"""
Shared HTTP client used for every probe.

A single httpx.Client is shared by all workers of a run; its connection
pool is thread-safe, so keep-alive connections to the provider are reused
instead of paying a TLS handshake per candidate.
"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional
import httpx

from bucketfinder.core.models import ProbeResponse
from bucketfinder.errors import ProbeError

CHUNK_SIZE = 64 * 1024


def _reason(error: Exception) -> str:
    return str(error) or error.__class__.__name__


class ProbeStream:
    """
    An open GET response whose body has not been read yet.

    ``iter_bytes`` raises ProbeError on transport failures and once the
    whole request has run past the client's timeout.
    """

    def __init__(self, url: str, response: httpx.Response, deadline: float, timeout: float):
        self.url = url
        self.status_code = response.status_code
        self._response = response
        self._deadline = deadline
        self._timeout = timeout

    def iter_bytes(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        try:
            for chunk in self._response.iter_bytes(chunk_size):
                if time.monotonic() > self._deadline:
                    raise ProbeError(self.url, f"request took longer than {self._timeout:g}s")
                yield chunk
        except httpx.HTTPError as e:
            raise ProbeError(self.url, _reason(e)) from e


class ProbeClient:
    """
    Performs single GET/HEAD requests and returns raw bodies.

    ``timeout`` bounds the whole request, body included, not just each
    connect or read step.

    Usage:
        with ProbeClient(timeout=30.0) as client:
            response = client.fetch("https://s3.amazonaws.com/acme")

            with client.stream("https://s3.amazonaws.com/acme/big.bin") as body:
                for chunk in body.iter_bytes():
                    ...
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 100,
        max_redirects: int = 5,
        user_agent: str = "",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            timeout: Overall request timeout in seconds
            max_connections: Size of the connection pool
            max_redirects: HTTP redirects followed before giving up
            user_agent: Optional User-Agent header
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout
        headers = {"User-Agent": user_agent} if user_agent else {}
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_keepalive_connections=max_connections,
                max_connections=max_connections,
                keepalive_expiry=30.0,
            ),
            headers=headers,
            http2=transport is None,
            verify=True,
            follow_redirects=True,
            max_redirects=max_redirects,
            transport=transport,
        )

    def _send(self, url: str, method: str) -> httpx.Response:
        try:
            return self._client.send(self._client.build_request(method, url), stream=True)
        except httpx.HTTPError as e:
            raise ProbeError(url, _reason(e)) from e
        except httpx.InvalidURL as e:
            raise ProbeError(url, str(e)) from e

    @contextmanager
    def stream(self, url: str, method: str = "GET") -> Iterator[ProbeStream]:
        """
        Issue one request and hand back the body unread, for writing to disk.

        Raises:
            ProbeError: on DNS, connect or timeout failure
        """
        deadline = time.monotonic() + self.timeout
        response = self._send(url, method)
        try:
            yield ProbeStream(url, response, deadline, self.timeout)
        finally:
            response.close()

    def fetch(self, url: str, method: str = "GET") -> ProbeResponse:
        """
        Issue one request. No retries.

        Raises:
            ProbeError: on DNS, connect, timeout or body read failure
        """
        if method == "HEAD":
            response = self._send(url, method)
            response.close()
            return ProbeResponse(url=url, status_code=response.status_code)

        with self.stream(url, method) as body:
            content = b"".join(body.iter_bytes())
        return ProbeResponse(url=url, status_code=body.status_code, content=content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ProbeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
