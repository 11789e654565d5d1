"""
Bucket name permutation engine.

Expands a handful of seed keywords into a bounded set of candidate
bucket names:
- Environment and purpose suffixes/prefixes (hyphenated and concatenated)
- Double-combined patterns
- Numeric and year suffixes
- Domain-style variations for dotted seeds
- Pairwise cross combinations when several seeds are given
"""

import itertools
from datetime import date
from typing import Iterable, Optional

from bucketfinder.utils.validators import is_valid_bucket_name


# High-signal suffixes, the empty suffix keeps the bare seed
SUFFIXES = [
    "",
    "-prod",
    "-staging",
    "-dev",
    "-backup",
    "-data",
    "-api",
    "-web",
    "-test",
    "-logs",
]

PREFIXES = [
    "backup-",
    "prod-",
    "staging-",
    "dev-",
    "api-",
    "web-",
    "test-",
    "s3-",
]

# No separator patterns
CONCAT_SUFFIXES = [
    "prod",
    "staging",
    "dev",
    "backup",
    "data",
    "logs",
    "test",
]

CONCAT_PREFIXES = [
    "backup",
    "prod",
    "dev",
    "s3",
]

# Double-combined patterns
DOUBLE_PATTERNS = [
    "backup-{name}-prod",
    "backup-{name}-staging",
    "prod-{name}-backup",
    "prod-{name}-data",
    "dev-{name}-data",
    "staging-{name}-backup",
    "s3-{name}-backup",
    "api-{name}-prod",
]

NUMERIC_SUFFIXES = ["1", "2", "-1", "-2"]

# Domain variations are limited to the terms that hit most often
DOMAIN_TERMS = ["dev", "test", "staging", "prod", "api", "backup"]

# Terms appended to pairwise cross combinations
CROSS_TERMS = ["prod", "staging", "backup"]

YEAR_SPAN = 3


def extract_base_name(keyword: str) -> str:
    """
    Reduce a domain-like or compound keyword to its first segment.

    Examples:
        "example.com" -> "example"
        "acme-corp" -> "acme"
        "ab-corp" -> "ab-corp" (segment too short)
    """
    for sep in (".", "-", "_", " "):
        if sep in keyword:
            first = keyword.split(sep)[0]
            if len(first) > 2:
                return first
    return keyword


def _core_permutations(seed: str) -> Iterable[str]:
    for suffix in SUFFIXES:
        yield seed + suffix
    for prefix in PREFIXES:
        yield prefix + seed
    for suffix in CONCAT_SUFFIXES:
        yield seed + suffix
    for prefix in CONCAT_PREFIXES:
        yield prefix + seed
    for pattern in DOUBLE_PATTERNS:
        yield pattern.format(name=seed)
    for suffix in NUMERIC_SUFFIXES:
        yield seed + suffix


def _domain_permutations(seed: str) -> Iterable[str]:
    domain = seed.split(".")[0]
    if not domain:
        return
    for term in DOMAIN_TERMS:
        yield f"{domain}-{term}"
        yield f"{term}-{domain}"


def _year_permutations(seed: str, year: int) -> Iterable[str]:
    for y in range(year - YEAR_SPAN + 1, year + 1):
        yield f"{seed}{y}"
        yield f"{seed}-{y}"


def _cross_permutations(bases: list[str]) -> Iterable[str]:
    for first, second in itertools.combinations(bases, 2):
        for a, b in ((first, second), (second, first)):
            yield f"{a}-{b}"
            for term in CROSS_TERMS:
                yield f"{a}-{b}-{term}"


def seed_permutations(seed: str, year: int) -> set[str]:
    """All valid candidates derived from a single normalized seed."""
    names = {seed}

    base = extract_base_name(seed)
    if base != seed:
        names.add(base)

    names.update(_core_permutations(seed))
    if "." in seed:
        names.update(_domain_permutations(seed))
    names.update(_year_permutations(seed, year))

    return {name for name in names if is_valid_bucket_name(name)}


def generate_candidates(seeds: Iterable[str], year: Optional[int] = None) -> set[str]:
    """
    Generate the candidate bucket names for a list of seed keywords.

    Year variants use the current calendar year unless ``year`` is given,
    so two calls in different years return different sets.
    """
    if year is None:
        year = date.today().year

    normalized = []
    for seed in seeds:
        seed = seed.strip().lower()
        if seed and seed not in normalized:
            normalized.append(seed)

    candidates: set[str] = set()
    for seed in normalized:
        candidates |= seed_permutations(seed, year)

    if len(normalized) > 1:
        bases = [extract_base_name(seed) for seed in normalized]
        candidates.update(
            name for name in _cross_permutations(bases) if is_valid_bucket_name(name)
        )

    return candidates
