"""Load ``context-profiles.json`` files."""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

from pydantic import ValidationError

from context_diag.models import ProfilesConfig

logger = logging.getLogger("context_diag.profiles")


class ProfileLoadError(ValueError):
    """Raised when a profiles file is missing, unreadable, or fails schema validation."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def load_profiles(path: Path) -> ProfilesConfig:
    """Read and schema-validate a profiles file.

    Semantic checks (threshold ordering, budget sums) are left to
    ``ProfileValidator`` so that a file can be loaded and then reported on.
    """
    if not path.exists():
        raise ProfileLoadError(path, "file not found")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProfileLoadError(path, f"cannot read file: {e}") from e

    try:
        config = ProfilesConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ProfileLoadError(path, f"schema validation failed:\n{e}") from e

    logger.info("Loaded %d profile(s) from %s", len(config.profiles), path)
    return config
