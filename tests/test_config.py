"""Tests for configuration loading and the region table."""

import pytest

from bucketfinder.config import BucketFinderConfig, ScanConfig, region_endpoint


class TestRegions:
    def test_known_regions(self):
        assert region_endpoint("us") == "https://s3.amazonaws.com"
        assert region_endpoint("ie") == "https://s3-eu-west-1.amazonaws.com"
        assert region_endpoint("nc") == "https://s3-us-west-1.amazonaws.com"
        assert region_endpoint("si") == "https://s3-ap-southeast-1.amazonaws.com"
        assert region_endpoint("to") == "https://s3-ap-northeast-1.amazonaws.com"

    def test_case_and_whitespace(self):
        assert region_endpoint(" US ") == "https://s3.amazonaws.com"

    def test_unknown(self):
        assert region_endpoint("xx") is None
        assert region_endpoint("") is None


class TestScanConfig:
    def test_defaults(self):
        scan = ScanConfig()
        assert scan.workers == 10
        assert scan.timeout == 30.0
        assert scan.max_redirect_depth == 5

    def test_delay_derived_from_workers(self):
        assert ScanConfig(workers=10).probe_delay() == pytest.approx(0.1)
        assert ScanConfig(workers=4).probe_delay() == pytest.approx(0.25)

    def test_explicit_delay(self):
        assert ScanConfig(workers=10, delay=0.5).probe_delay() == 0.5
        assert ScanConfig(delay=0.0).probe_delay() == 0.0
        assert ScanConfig(delay=-3).probe_delay() == 0.0


class TestBucketFinderConfig:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "bucketfinder:\n"
            "  scan:\n"
            "    workers: 3\n"
            "    max_redirect_depth: 2\n"
            "  output:\n"
            "    download_dir: loot\n"
        )
        config = BucketFinderConfig.load(path)
        assert config.scan.workers == 3
        assert config.scan.max_redirect_depth == 2
        assert config.output.download_dir == "loot"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = BucketFinderConfig.load_from_file(tmp_path / "nope.yaml")
        assert config.scan.workers == 10

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BUCKETFINDER_SCAN__WORKERS", "7")
        assert BucketFinderConfig().scan.workers == 7

    def test_save(self, tmp_path):
        config = BucketFinderConfig()
        config.scan.workers = 12
        path = tmp_path / "nested" / "config.yaml"
        config.save(path)
        assert BucketFinderConfig.load(path).scan.workers == 12
