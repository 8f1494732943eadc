"""File-based persistence helpers for record snapshots and export files."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import settings


class FileStorage:
    """Thin wrapper around the data root for storing JSON snapshots and export files."""

    def __init__(self, root: Path | None = None, export_dir_name: str | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.export_root = self.root / (export_dir_name or settings.export_dir_name)
        self.export_root.mkdir(parents=True, exist_ok=True)

    def make_export_path(self, extension: str, *, prefix: str | None = None) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        stem = f"{prefix or settings.export_file_prefix}_{timestamp}"
        path = self.export_root / f"{stem}.{extension}"
        counter = 1
        while path.exists():
            path = self.export_root / f"{stem}_{counter}.{extension}"
            counter += 1
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        tmp_path.replace(path)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_bytes(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            handle.write(payload)

    def read_bytes(self, path: Path) -> bytes:
        with path.open("rb") as handle:
            return handle.read()
