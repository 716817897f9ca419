"""Configuration helpers for locating the board's data files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

MAX_IMAGE_SIZE_BYTES = 500 * 1024
REPORTS_FILENAME = "lost_found_items.json"
IDENTITY_FILENAME = "local_user_id.json"


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    reports_path: Path
    identity_path: Path
    max_image_bytes: int = MAX_IMAGE_SIZE_BYTES


def default_data_dir() -> Path:
    return Path.home() / ".lost_found"


def load_config(data_dir: Optional[Path] = None, max_image_bytes: Optional[int] = None) -> AppConfig:
    resolved = Path(data_dir).expanduser() if data_dir else default_data_dir()
    resolved.mkdir(parents=True, exist_ok=True)
    limit = MAX_IMAGE_SIZE_BYTES if max_image_bytes is None else int(max_image_bytes)
    if limit < 0:
        raise ValueError("max_image_bytes must be >= 0")
    return AppConfig(
        data_dir=resolved,
        reports_path=resolved / REPORTS_FILENAME,
        identity_path=resolved / IDENTITY_FILENAME,
        max_image_bytes=limit,
    )
