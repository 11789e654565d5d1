"""Core modules for bucketfinder."""

from bucketfinder.core.models import (
    Classification,
    ErrorCode,
    Listing,
    ObjectEntry,
    ProviderError,
    Unrecognized,
    WalkContext,
    BucketFinding,
    ScanResult,
)
from bucketfinder.core.walker import Walker
from bucketfinder.core.scheduler import WorkerPool
from bucketfinder.core.scanner import BucketScanner, ScanRequest

__all__ = [
    "Classification",
    "ErrorCode",
    "Listing",
    "ObjectEntry",
    "ProviderError",
    "Unrecognized",
    "WalkContext",
    "BucketFinding",
    "ScanResult",
    "Walker",
    "WorkerPool",
    "BucketScanner",
    "ScanRequest",
]
