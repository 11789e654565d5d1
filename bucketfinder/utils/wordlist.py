"""
Wordlist loading.
"""

from pathlib import Path

from bucketfinder.errors import ConfigurationError


def load_wordlist(path: Path) -> list[str]:
    """
    Read one bucket name per line, skipping blank lines.

    Raises:
        ConfigurationError: if the file is missing or a line is not valid UTF-8
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Wordlist file doesn't exist: {path}")

    names = []
    with open(path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                name = raw.decode("utf-8-sig").strip()
            except UnicodeDecodeError:
                raise ConfigurationError(f"Wordlist line {lineno} is not valid UTF-8: {path}") from None
            if name:
                names.append(name)
    return names
