"""Tests for provider response classification."""

from bucketfinder.core.models import ErrorCode, Listing, ProviderError, Unrecognized
from bucketfinder.modules.classifier import classify

from conftest import error_xml, listing_xml


class TestListing:
    def test_listing_with_objects(self):
        result = classify(listing_xml("example", ["index.html", "backups/db.sql"]))
        assert isinstance(result, Listing)
        assert result.bucket_name == "example"
        assert [o.key for o in result.objects] == ["index.html", "backups/db.sql"]
        assert result.objects[0].size == len("index.html")
        assert result.objects[0].last_modified == "2024-01-01T00:00:00.000Z"
        assert result.objects[0].etag == "abc"

    def test_empty_bucket_is_still_a_listing(self):
        result = classify(listing_xml("example", []))
        assert isinstance(result, Listing)
        assert result.objects == []

    def test_listing_without_namespace(self):
        body = b"<ListBucketResult><Name>plain</Name><Contents><Key>a</Key></Contents></ListBucketResult>"
        result = classify(body)
        assert isinstance(result, Listing)
        assert result.objects[0].key == "a"
        assert result.objects[0].size == 0

    def test_listing_without_name(self):
        assert isinstance(classify(b"<ListBucketResult><Name></Name></ListBucketResult>"), Unrecognized)


class TestProviderError:
    def test_access_denied(self):
        result = classify(error_xml("AccessDenied", "Access Denied"))
        assert isinstance(result, ProviderError)
        assert result.code is ErrorCode.ACCESS_DENIED
        assert result.raw_code == "AccessDenied"
        assert result.message == "Access Denied"
        assert result.endpoint is None

    def test_redirect_endpoint(self):
        result = classify(error_xml("PermanentRedirect", "Use this endpoint", "acme.s3-eu-west-1.amazonaws.com"))
        assert result.code is ErrorCode.PERMANENT_REDIRECT
        assert result.endpoint == "acme.s3-eu-west-1.amazonaws.com"

    def test_known_codes(self):
        assert classify(error_xml("NoSuchBucket")).code is ErrorCode.NO_SUCH_BUCKET
        assert classify(error_xml("NoSuchKey")).code is ErrorCode.NO_SUCH_KEY

    def test_unknown_code_kept_verbatim(self):
        result = classify(error_xml("SlowDown", "Please reduce your request rate."))
        assert result.code is ErrorCode.OTHER
        assert result.raw_code == "SlowDown"
        assert result.message == "Please reduce your request rate."

    def test_error_without_code(self):
        assert isinstance(classify(b"<Error><Message>oops</Message></Error>"), Unrecognized)


class TestUnrecognized:
    def test_garbage(self):
        assert isinstance(classify(b"this is not xml"), Unrecognized)

    def test_html(self):
        assert isinstance(classify(b"<html><body>Hello</body></html>"), Unrecognized)

    def test_truncated_xml(self):
        assert isinstance(classify(b"<ListBucketResult><Name>x</Name>"), Unrecognized)

    def test_empty(self):
        assert isinstance(classify(b""), Unrecognized)
        assert isinstance(classify(b"   \n"), Unrecognized)
