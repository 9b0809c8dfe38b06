"""Load optional seed records for the generated storage groups.

Seed files are a JSON/YAML object mapping group names to lists of records.
Keys are canonicalized the same way tags are, so ``pets``, ``Pets`` and the
tag ``pets`` all land in the ``Pets`` group.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .naming import to_pascal_case

logger = logging.getLogger(__name__)

SeedData = dict[str, list[Any]]


class SeedDataError(ValueError):
    """The seed document exists but is not a mapping of group -> records."""


def filter_seed_data(content: Any) -> SeedData:
    """Keep only list-valued entries, keyed by canonical group name."""
    if not isinstance(content, dict):
        raise SeedDataError("Seed data must be a JSON object")

    seed: SeedData = {}
    for key, value in content.items():
        if not isinstance(value, list):
            logger.warning("Seed data for %r is not an array, skipping", key)
            continue
        seed[to_pascal_case(str(key))] = value
    return seed


def load_seed_data(path: Path | None) -> SeedData | None:
    """Read a seed file.

    Returns None when no path is given. A missing, unparseable or non-object
    file is reported as a warning and also gives None; generation goes on
    without seed records.
    """
    if path is None:
        return None

    seed_path = Path(path)
    if not seed_path.exists():
        logger.warning("Seed file not found: %s", seed_path)
        return None

    try:
        content = yaml.safe_load(seed_path.read_text(encoding="utf-8"))
        seed = filter_seed_data(content)
    except (OSError, yaml.YAMLError, SeedDataError) as e:
        logger.warning("Could not load seed file %s: %s", seed_path, e)
        return None

    logger.debug(
        "Seed data loaded: %s",
        ", ".join(f"{k}: {len(v)} items" for k, v in seed.items()) or "empty",
    )
    return seed


def seed_records(seed: SeedData | None, group: str) -> list[Any]:
    """Records for a storage group. A missing group and an empty list are the same."""
    if not seed:
        return []
    return list(seed.get(group) or [])
