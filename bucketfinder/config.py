"""
Configuration management for bucketfinder.

Handles loading configuration from YAML files and environment variables,
and holds the region code to endpoint table.
"""

from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Short region codes accepted on the command line
REGION_ENDPOINTS = {
    "us": "https://s3.amazonaws.com",
    "ie": "https://s3-eu-west-1.amazonaws.com",
    "nc": "https://s3-us-west-1.amazonaws.com",
    "or": "https://s3-us-west-2.amazonaws.com",
    "fr": "https://s3.eu-central-1.amazonaws.com",
    "si": "https://s3-ap-southeast-1.amazonaws.com",
    "sy": "https://s3-ap-southeast-2.amazonaws.com",
    "to": "https://s3-ap-northeast-1.amazonaws.com",
    "sp": "https://s3-sa-east-1.amazonaws.com",
}

REGION_NAMES = {
    "us": "US Standard",
    "ie": "Ireland",
    "nc": "Northern California",
    "or": "Oregon",
    "fr": "Frankfurt",
    "si": "Singapore",
    "sy": "Sydney",
    "to": "Tokyo",
    "sp": "Sao Paulo",
}


def region_endpoint(code: str) -> Optional[str]:
    """Return the base URL for a region code, or None if unknown."""
    return REGION_ENDPOINTS.get(code.strip().lower())


class ScanConfig(BaseModel):
    """Probing settings."""
    workers: int = 10
    delay: Optional[float] = None  # seconds per probe; None derives it from workers
    timeout: float = 30.0  # seconds
    max_redirect_depth: int = 5
    max_redirects: int = 5  # HTTP-level redirects followed by the client
    rate_limit: int = 0  # global requests per second, 0 disables
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    def probe_delay(self) -> float:
        """Per-probe sleep. Defaults to 1000/workers milliseconds."""
        if self.delay is not None:
            return max(0.0, self.delay)
        return 1.0 / max(1, self.workers)


class OutputConfig(BaseModel):
    """Output settings."""
    download_dir: str = "."
    log_file: str = ""


class BucketFinderConfig(BaseSettings):
    """Main bucketfinder configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUCKETFINDER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    scan: ScanConfig = Field(default_factory=ScanConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "BucketFinderConfig":
        """Load configuration from a YAML file."""
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        # Handle nested 'bucketfinder' key if present
        if "bucketfinder" in data:
            data = data["bucketfinder"]

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "BucketFinderConfig":
        """
        Load configuration from the first source found:
        1. Provided config file path
        2. ./bucketfinder.yaml
        3. ~/.config/bucketfinder/config.yaml
        4. Environment variables and defaults
        """
        config_files = [
            config_path,
            Path("./bucketfinder.yaml"),
            Path.home() / ".config" / "bucketfinder" / "config.yaml",
        ]

        for path in config_files:
            if path and path.exists():
                return cls.load_from_file(path)

        return cls()

    def save(self, config_path: Path) -> None:
        """Save configuration to a YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(
                {"bucketfinder": self.model_dump(exclude_none=True)},
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def get_download_dir(self) -> Path:
        """Get the root directory for downloaded objects."""
        return Path(self.output.download_dir)
