"""
Pydantic data models for bucketfinder.

These models represent provider responses, walk state, and the
findings collected during a scan.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Provider error codes with dedicated handling."""
    NO_SUCH_KEY = "NoSuchKey"
    ACCESS_DENIED = "AccessDenied"
    NO_SUCH_BUCKET = "NoSuchBucket"
    PERMANENT_REDIRECT = "PermanentRedirect"
    OTHER = "Other"

    @classmethod
    def from_raw(cls, code: str) -> "ErrorCode":
        for member in cls:
            if member is not cls.OTHER and member.value == code:
                return member
        return cls.OTHER


class BucketStatus(str, Enum):
    """How a bucket revealed itself."""
    LISTABLE = "listable"
    ACCESS_DENIED = "access_denied"
    KEY_MISSING = "key_missing"


class FileStatus(str, Enum):
    """Accessibility of a single object."""
    DOWNLOADED = "Downloaded"
    PUBLIC = "Public"
    PRIVATE = "Private"
    READABLE_NOT_SAVED = "ReadableNotSaved"


class ObjectEntry(BaseModel):
    """One <Contents> entry of a bucket listing."""
    key: str
    size: int = 0
    last_modified: str = ""
    etag: str = ""


class Listing(BaseModel):
    """A publicly listable bucket."""
    kind: Literal["listing"] = "listing"
    bucket_name: str
    objects: list[ObjectEntry] = Field(default_factory=list)


class ProviderError(BaseModel):
    """An error document returned by the provider."""
    kind: Literal["error"] = "error"
    code: ErrorCode
    raw_code: str
    message: str = ""
    endpoint: Optional[str] = None


class Unrecognized(BaseModel):
    """A body that is neither a listing nor an error document."""
    kind: Literal["unrecognized"] = "unrecognized"


Classification = Union[Listing, ProviderError, Unrecognized]


class ProbeResponse(BaseModel):
    """Raw outcome of a single HTTP request."""
    url: str
    status_code: int
    content: bytes = b""


class WalkContext(BaseModel):
    """Position of the walker inside a (possibly redirected) probe."""
    host: str
    bucket: str
    depth: int = 0
    worker_id: int = 0
    # Set once a redirect endpoint (bucket.s3-region...) is being followed
    virtual_host: bool = False

    def redirected(self, host: str) -> "WalkContext":
        return self.model_copy(update={"host": host, "depth": self.depth + 1, "virtual_host": True})


class ObjectResult(BaseModel):
    """Outcome of the file-handling step for one key."""
    key: str
    url: str
    status: FileStatus
    local_path: Optional[Path] = None
    error: str = ""


class BucketFinding(BaseModel):
    """A bucket confirmed to exist."""
    name: str
    url: str
    status: BucketStatus
    depth: int = 0
    objects: list[ObjectResult] = Field(default_factory=list)


class ScanResult(BaseModel):
    """Summary of a complete run."""
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    total_candidates: int = 0
    workers: int = 0
    probed: int = 0
    transport_errors: int = 0
    failures: int = 0
    buckets: list[BucketFinding] = Field(default_factory=list)

    @property
    def found_names(self) -> set[str]:
        return {b.name for b in self.buckets}

    @property
    def listable(self) -> list[BucketFinding]:
        return [b for b in self.buckets if b.status == BucketStatus.LISTABLE]

    @property
    def denied(self) -> list[BucketFinding]:
        return [b for b in self.buckets if b.status == BucketStatus.ACCESS_DENIED]
