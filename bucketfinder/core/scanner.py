"""
Scan entry point.

Validates the request, resolves the candidate list and region endpoint,
then hands everything to the worker pool.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from bucketfinder.config import BucketFinderConfig, region_endpoint
from bucketfinder.core.models import ScanResult
from bucketfinder.core.scheduler import WorkerPool
from bucketfinder.core.walker import Fetcher, Walker
from bucketfinder.errors import ConfigurationError
from bucketfinder.modules.permutations import generate_candidates
from bucketfinder.utils.http_client import ProbeClient
from bucketfinder.utils.output import ScanLog
from bucketfinder.utils.rate_limiter import RateLimiter
from bucketfinder.utils.wordlist import load_wordlist


class ScanRequest(BaseModel):
    """What to scan: seed keywords or a wordlist, never both."""
    keywords: list[str] = Field(default_factory=list)
    wordlist: Optional[Path] = None
    region: str = "us"
    download: bool = False
    verbose: bool = False


class BucketScanner:
    """
    Runs one complete scan.

    Configuration problems raise ConfigurationError before any request
    is sent. Everything after that is reported through the log sink.
    """

    def __init__(
        self,
        config: Optional[BucketFinderConfig] = None,
        log: Optional[ScanLog] = None,
        client: Optional[Fetcher] = None,
    ):
        """
        Initialize the scanner.

        Args:
            config: Configuration. If None, loads from default locations.
            log: Output sink. If None, a console-only sink is created.
            client: Probe client. If None, an httpx-backed ProbeClient is
                created for the run and closed afterwards.
        """
        self.config = config or BucketFinderConfig.load()
        self.log = log or ScanLog()
        self.client = client

    def resolve_host(self, request: ScanRequest) -> str:
        host = region_endpoint(request.region)
        if host is None:
            raise ConfigurationError(f"Unknown region specified: {request.region}")
        return host

    def resolve_candidates(self, request: ScanRequest) -> list[str]:
        """Bucket names to probe, in queue order."""
        keywords = [k.strip().lower() for k in request.keywords if k.strip()]

        if not keywords and request.wordlist is None:
            raise ConfigurationError("Missing wordlist or keyword")
        if keywords and request.wordlist is not None:
            raise ConfigurationError("Cannot specify both wordlist and keyword, choose one")

        if keywords:
            return sorted(generate_candidates(keywords))
        return load_wordlist(request.wordlist)

    def run(self, request: ScanRequest) -> ScanResult:
        """Probe every candidate of ``request`` and return the summary."""
        scan = self.config.scan
        if scan.workers < 1:
            raise ConfigurationError("Number of workers must be at least 1")

        host = self.resolve_host(request)
        candidates = self.resolve_candidates(request)
        self.log.verbose = request.verbose

        if request.keywords:
            self.log.line(
                f"Generated {len(candidates)} bucket name permutations from keyword: "
                f"{', '.join(request.keywords)}",
                style="bold cyan",
            )
        else:
            self.log.line(
                f"Loaded {len(candidates)} bucket names from wordlist",
                style="bold cyan",
            )

        owns_client = self.client is None
        client = self.client or ProbeClient(
            timeout=scan.timeout,
            max_connections=max(scan.workers * 2, 10),
            max_redirects=scan.max_redirects,
            user_agent=scan.user_agent,
        )

        try:
            walker = Walker(
                client,
                self.log,
                download=request.download,
                download_dir=self.config.get_download_dir(),
                max_depth=scan.max_redirect_depth,
            )
            pool = WorkerPool(
                walker,
                host,
                self.log,
                workers=scan.workers,
                delay=scan.probe_delay(),
                limiter=RateLimiter(scan.rate_limit) if scan.rate_limit > 0 else None,
            )
            return pool.run(candidates)
        finally:
            if owns_client:
                client.close()
