"""
bucketfinder - public cloud storage bucket discovery

Generates candidate bucket names from keywords (or reads them from a
wordlist), probes them against the provider's public endpoint, and
inspects the contents of anything that turns out to be listable.
"""

__version__ = "2.1.0"
__author__ = "Security Team"

from bucketfinder.core.models import (
    BucketFinding,
    BucketStatus,
    FileStatus,
    ScanResult,
)
from bucketfinder.core.scanner import BucketScanner, ScanRequest

__all__ = [
    "BucketFinding",
    "BucketStatus",
    "FileStatus",
    "ScanResult",
    "BucketScanner",
    "ScanRequest",
]
