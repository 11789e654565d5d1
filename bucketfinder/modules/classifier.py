"""
Provider response classification.

Turns a raw response body into a bucket listing, a provider error
document, or an unrecognized payload.
"""

from typing import Optional
from xml.etree import ElementTree

from bucketfinder.core.models import (
    Classification,
    ErrorCode,
    Listing,
    ObjectEntry,
    ProviderError,
    Unrecognized,
)


def _local_name(tag: str) -> str:
    # "{http://s3.amazonaws.com/doc/2006-03-01/}Key" -> "Key"
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ElementTree.Element, name: str, strip: bool = True) -> str:
    for child in element:
        if _local_name(child.tag) == name:
            text = child.text or ""
            return text.strip() if strip else text
    return ""


def _parse_size(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _parse_listing(root: ElementTree.Element) -> Optional[Listing]:
    if _local_name(root.tag) != "ListBucketResult":
        return None

    name = _child_text(root, "Name")
    if not name:
        return None

    objects = []
    for child in root:
        if _local_name(child.tag) != "Contents":
            continue
        objects.append(
            ObjectEntry(
                key=_child_text(child, "Key", strip=False),
                size=_parse_size(_child_text(child, "Size")),
                last_modified=_child_text(child, "LastModified"),
                etag=_child_text(child, "ETag").strip('"'),
            )
        )

    return Listing(bucket_name=name, objects=objects)


def _parse_error(root: ElementTree.Element) -> Optional[ProviderError]:
    if _local_name(root.tag) != "Error":
        return None

    code = _child_text(root, "Code")
    if not code:
        return None

    return ProviderError(
        code=ErrorCode.from_raw(code),
        raw_code=code,
        message=_child_text(root, "Message"),
        endpoint=_child_text(root, "Endpoint") or None,
    )


def classify(content: bytes) -> Classification:
    """
    Classify a response body.

    A listing with a bucket name wins even when it holds no objects,
    an error document needs a non-empty code, anything else is
    unrecognized.
    """
    if not content or not content.strip():
        return Unrecognized()

    try:
        root = ElementTree.fromstring(content)
    except ElementTree.ParseError:
        return Unrecognized()

    listing = _parse_listing(root)
    if listing is not None:
        return listing

    error = _parse_error(root)
    if error is not None:
        return error

    return Unrecognized()
