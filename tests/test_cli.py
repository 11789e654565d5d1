"""Tests for the command-line interface."""

from typer.testing import CliRunner

from bucketfinder import __version__
from bucketfinder.cli import app
from bucketfinder.config import BucketFinderConfig

from conftest import FakeProvider, listing_xml


runner = CliRunner()


class TestCommands:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_regions(self):
        result = runner.invoke(app, ["regions"])
        assert result.exit_code == 0
        assert "Ireland" in result.output

    def test_permutations(self):
        result = runner.invoke(app, ["permutations", "acme"])
        assert result.exit_code == 0
        names = result.output.split()
        assert "acme-backup" in names
        assert "backup-acme-prod" in names

    def test_permutations_requires_keywords(self):
        result = runner.invoke(app, ["permutations", " , "])
        assert result.exit_code == 1


class TestScanCommand:
    def test_missing_source(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["scan", "-q"])
        assert result.exit_code == 1
        assert "Missing wordlist or keyword" in result.output

    def test_conflicting_source(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "words.txt").write_text("acme\n")
        result = runner.invoke(app, ["scan", "-q", "-k", "acme", "words.txt"])
        assert result.exit_code == 1
        assert "Cannot specify both" in result.output

    def test_unknown_region(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["scan", "-q", "-k", "acme", "-r", "xx"])
        assert result.exit_code == 1
        assert "Unknown region" in result.output

    def test_scan_wordlist(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        host = "https://s3.amazonaws.com"
        provider = FakeProvider({
            f"{host}/acme-backup": (200, listing_xml("acme-backup", ["a.txt"])),
            f"{host}/acme-backup/a.txt": (200, b""),
        })
        monkeypatch.setattr("bucketfinder.core.scanner.ProbeClient", lambda **kwargs: provider)
        (tmp_path / "words.txt").write_text("acme\nacme-backup\n")

        result = runner.invoke(app, ["scan", "words.txt", "-w", "2", "--delay", "0", "-l", "out.log"])

        assert result.exit_code == 0, result.output
        assert "Bucket Found: acme-backup" in result.output
        assert "Scan Summary" in result.output
        assert provider.closed
        assert "Bucket Found: acme-backup" in (tmp_path / "out.log").read_text()


class TestConfigCommand:
    def test_init_writes_loadable_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["config", "--init"])

        assert result.exit_code == 0, result.output
        assert "Configuration file created" in result.output
        saved = BucketFinderConfig.load_from_file(tmp_path / "bucketfinder.yaml")
        assert saved.scan.workers == 10
        assert saved.scan.max_redirect_depth == 5

    def test_init_refuses_to_overwrite(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("bucketfinder:\n  scan:\n    workers: 3\n")
        result = runner.invoke(app, ["config", "--init", "-p", str(path)])

        assert result.exit_code == 1
        assert "workers: 3" in path.read_text()

    def test_show(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("bucketfinder:\n  scan:\n    workers: 3\n")
        result = runner.invoke(app, ["config", "--show", "-p", str(path)])

        assert result.exit_code == 0, result.output
        assert "scan.workers" in result.output
        assert "3" in result.output
