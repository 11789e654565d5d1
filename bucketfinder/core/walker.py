"""
Recursive bucket walker.

Probes one candidate, applies the provider response policy, follows
cross-region redirects up to a fixed depth, and checks (or downloads)
every object of a listable bucket.
"""

import contextlib
import threading
from pathlib import Path, PurePosixPath
from typing import ContextManager, Iterable, Iterator, Optional, Protocol
from urllib.parse import quote

from bucketfinder.core.models import (
    BucketFinding,
    BucketStatus,
    ErrorCode,
    FileStatus,
    Listing,
    ObjectResult,
    ProbeResponse,
    ProviderError,
    WalkContext,
)
from bucketfinder.errors import DownloadError, ProbeError, RedirectDepthError
from bucketfinder.modules.classifier import classify
from bucketfinder.utils.output import ScanLog


class Fetcher(Protocol):
    def fetch(self, url: str, method: str = "GET") -> ProbeResponse: ...

    def stream(self, url: str) -> ContextManager["BodyStream"]: ...


class BodyStream(Protocol):
    status_code: int

    def iter_bytes(self) -> Iterator[bytes]: ...


def endpoint_host(endpoint: str) -> str:
    """Turn a redirect <Endpoint> value into a base URL."""
    endpoint = endpoint.strip().rstrip("/")
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    return f"https://{endpoint}"


def bucket_url(host: str, bucket: str, virtual_host: bool = False) -> str:
    """
    URL of a bucket listing.

    Region endpoints are path-style (host/bucket). A redirect endpoint
    already names the bucket in its host, so it is probed at its root.
    """
    host = host.rstrip("/")
    if virtual_host:
        return f"{host}/"
    return f"{host}/{bucket}"


def object_url(host: str, bucket: str, key: str, virtual_host: bool = False) -> str:
    host = host.rstrip("/")
    quoted = quote(key, safe="/~")
    if virtual_host:
        return f"{host}/{quoted}"
    return f"{host}/{bucket}/{quoted}"


class Walker:
    """
    Walks a single candidate bucket.

    A walker is shared by all workers of a run; the only state it keeps
    between calls is the transport error counter, guarded by a lock.
    """

    def __init__(
        self,
        client: Fetcher,
        log: ScanLog,
        download: bool = False,
        download_dir: Optional[Path] = None,
        max_depth: int = 5,
    ):
        self.client = client
        self.log = log
        self.download = download
        self.download_dir = Path(download_dir) if download_dir else Path(".")
        self.max_depth = max_depth
        self.transport_errors = 0
        self._lock = threading.Lock()

    def walk(self, host: str, bucket: str, depth: int = 0, worker_id: int = 0) -> list[BucketFinding]:
        """Probe ``bucket`` on ``host`` and return every confirmed bucket."""
        ctx = WalkContext(host=host, bucket=bucket, depth=depth, worker_id=worker_id)
        findings: list[BucketFinding] = []
        try:
            self._probe(ctx, findings)
        except RedirectDepthError as e:
            self.log.line(f"{self._prefix(ctx)}{e}", style="red")
        return findings

    def _prefix(self, ctx: WalkContext, indent: int = 0) -> str:
        worker = f"[Worker {ctx.worker_id}] " if self.log.verbose else ""
        return worker + "\t" * (ctx.depth + indent)

    def _probe(self, ctx: WalkContext, findings: list[BucketFinding]) -> None:
        url = bucket_url(ctx.host, ctx.bucket, ctx.virtual_host)
        try:
            response = self.client.fetch(url)
        except ProbeError as e:
            with self._lock:
                self.transport_errors += 1
            self.log.debug(
                f"{self._prefix(ctx)}Error requesting page for {ctx.bucket}: {e.reason}",
                persist=True,
            )
            return

        if not response.content:
            return

        result = classify(response.content)
        if isinstance(result, Listing):
            findings.append(self._handle_listing(ctx, url, result))
        elif isinstance(result, ProviderError):
            self._handle_error(ctx, url, result, findings)
        elif self.log.verbose:
            self.log.line(f"{self._prefix(ctx)} No valid data returned", style="dim")

    def _handle_listing(self, ctx: WalkContext, url: str, listing: Listing) -> BucketFinding:
        self.log.line(
            f"{self._prefix(ctx)}Bucket Found: {ctx.bucket} ( {url} )",
            style="bold green",
        )
        finding = BucketFinding(
            name=ctx.bucket,
            url=url,
            status=BucketStatus.LISTABLE,
            depth=ctx.depth,
        )

        for entry in listing.objects:
            # Directory markers and empty keys carry no content
            if not entry.key or entry.key.endswith("/"):
                continue
            finding.objects.append(self._handle_object(ctx, entry.key))

        return finding

    def _handle_error(
        self,
        ctx: WalkContext,
        url: str,
        error: ProviderError,
        findings: list[BucketFinding],
    ) -> None:
        prefix = self._prefix(ctx)

        if error.code is ErrorCode.NO_SUCH_KEY:
            self.log.line(f"{prefix}The specified key does not exist: {ctx.bucket}", style="yellow")
            findings.append(
                BucketFinding(name=ctx.bucket, url=url, status=BucketStatus.KEY_MISSING, depth=ctx.depth)
            )
        elif error.code is ErrorCode.ACCESS_DENIED:
            self.log.line(f"{prefix}Bucket found but access denied: {ctx.bucket}", style="yellow")
            findings.append(
                BucketFinding(name=ctx.bucket, url=url, status=BucketStatus.ACCESS_DENIED, depth=ctx.depth)
            )
        elif error.code is ErrorCode.NO_SUCH_BUCKET:
            # Never written to the log file, shown on the console only when verbose
            self.log.debug(f"{prefix}Bucket does not exist: {ctx.bucket}")
        elif error.code is ErrorCode.PERMANENT_REDIRECT:
            if not error.endpoint:
                self.log.line(f"{prefix}Redirect found but can't find where to: {ctx.bucket}", style="cyan")
                return
            self.log.line(f"{prefix}Bucket {ctx.bucket} redirects to: {error.endpoint}", style="cyan")
            if ctx.depth + 1 > self.max_depth:
                raise RedirectDepthError(
                    f"Redirect depth limit ({self.max_depth}) exceeded for {ctx.bucket} "
                    f"at {error.endpoint}, giving up"
                )
            self._probe(ctx.redirected(endpoint_host(error.endpoint)), findings)
        else:
            self.log.line(
                f"{prefix}Unknown error for {ctx.bucket}: {error.raw_code} - {error.message}",
                style="magenta",
            )

    def _handle_object(self, ctx: WalkContext, key: str) -> ObjectResult:
        url = object_url(ctx.host, ctx.bucket, key, ctx.virtual_host)

        if self.download:
            result = self._download_object(ctx, key, url)
        else:
            result = self._check_object(key, url)

        prefix = self._prefix(ctx, indent=1)
        if result.status is FileStatus.DOWNLOADED:
            self.log.line(f"{prefix}<Downloaded> {url}", style="green")
        elif result.status is FileStatus.PUBLIC:
            self.log.line(f"{prefix}<Public> {url}", style="green")
        elif result.status is FileStatus.READABLE_NOT_SAVED:
            self.log.line(f"{prefix}<Public> {url} (readable but not saved: {result.error})", style="yellow")
        else:
            self.log.line(f"{prefix}<Private> {url}")

        return result

    def _check_object(self, key: str, url: str) -> ObjectResult:
        try:
            response = self.client.fetch(url, "HEAD")
        except ProbeError:
            return ObjectResult(key=key, url=url, status=FileStatus.PRIVATE)

        status = FileStatus.PUBLIC if response.status_code == 200 else FileStatus.PRIVATE
        return ObjectResult(key=key, url=url, status=status)

    def _download_object(self, ctx: WalkContext, key: str, url: str) -> ObjectResult:
        try:
            with self.client.stream(url) as response:
                if response.status_code != 200:
                    return ObjectResult(key=key, url=url, status=FileStatus.PRIVATE)
                try:
                    path = self._save(ctx.bucket, key, response.iter_bytes())
                except DownloadError as e:
                    return ObjectResult(key=key, url=url, status=FileStatus.READABLE_NOT_SAVED, error=str(e))
        except ProbeError:
            return ObjectResult(key=key, url=url, status=FileStatus.PRIVATE)

        return ObjectResult(key=key, url=url, status=FileStatus.DOWNLOADED, local_path=path)

    def local_path(self, bucket: str, key: str) -> Path:
        """
        Location of a downloaded object: <download_dir>/<bucket>/<key path>.

        Raises:
            DownloadError: if the key would land outside the bucket directory
        """
        parts = [part for part in PurePosixPath(key).parts if part not in ("/", ".")]
        if not parts or ".." in parts:
            raise DownloadError(f"unsafe object key {key!r}")

        root = (self.download_dir / bucket).resolve()
        target = root.joinpath(*parts).resolve()
        if target == root or not target.is_relative_to(root):
            raise DownloadError(f"unsafe object key {key!r}")
        return target

    def _save(self, bucket: str, key: str, chunks: Iterable[bytes]) -> Path:
        """
        Write a streamed body to its local path.

        A partial file is removed when either the write or the transfer
        fails; both are reported as DownloadError.
        """
        target = self.local_path(bucket, key)
        try:
            # Concurrent workers may create the same parent, exist_ok makes that a no-op
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                for chunk in chunks:
                    f.write(chunk)
        except (OSError, ProbeError) as e:
            with contextlib.suppress(OSError):
                target.unlink(missing_ok=True)
            raise DownloadError(e.reason if isinstance(e, ProbeError) else str(e)) from e
        return target
