"""Target catalog loading from JSON."""

import json
from pathlib import Path

from ..core.resolver import validate_catalog
from ..errors import MalformedTargetError
from ..models.target import BlockTarget, TargetKind

# Used when no catalog file is given
DEFAULT_CATALOG: tuple[BlockTarget, ...] = (
    BlockTarget("com.instagram.android", "Instagram"),
    BlockTarget("com.zhiliaoapp.musically", "TikTok"),
    BlockTarget("com.google.android.youtube", "YouTube"),
    BlockTarget("com.twitter.android", "X"),
    BlockTarget("social", "Social Networking", TargetKind.CATEGORY),
)


def load_catalog(path: Path) -> list[BlockTarget]:
    """Load a target catalog from a JSON file.

    The file holds either a list of targets or an object with a
    "targets" list. Each target needs a platform_agnostic_identifier.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedTargetError: If the file is not JSON, or an entry is invalid,
            empty or duplicated
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog not found: {path}")

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedTargetError(f"Invalid JSON in {path}: {e}") from e

    entries = data.get("targets", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise MalformedTargetError(f"Expected a list of targets in {path}")

    targets = []
    for position, entry in enumerate(entries):
        try:
            targets.append(BlockTarget.from_dict(entry))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise MalformedTargetError(
                f"Invalid target at position {position} in {path}: {e}"
            ) from e

    validate_catalog(targets)
    return targets
