"""Storage for uploaded binary assets (sku thumbnails).

Assets live flat inside one directory and records refer to them by bare
filename. ``remove`` reports failures as :class:`AssetError`; ``discard`` is
the cleanup variant used on failure paths and only logs, so the error that is
already propagating reaches the caller unchanged.
"""
from __future__ import annotations

import os
import time
from uuid import uuid4
from pathlib import Path
from typing import BinaryIO

from werkzeug.utils import secure_filename

from .errors import AssetError, ValidationError
from .logger import get_logger

_logger = get_logger(__name__)


class AssetStore:
    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        if not name or Path(name).name != name or name in {".", ".."}:
            raise ValidationError(f"invalid asset name: {name!r}")
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def save(self, stream: BinaryIO, original_name: str) -> str:
        """Persist ``stream`` under a unique name and return that name."""

        safe = secure_filename(original_name or "") or "upload"
        name = f"{int(time.time() * 1000)}-{uuid4().hex[:6]}-{safe}"
        target = self.path_for(name)
        tmp_path = target.with_suffix(target.suffix + ".part")
        try:
            with tmp_path.open("wb") as fh:
                while True:
                    chunk = stream.read(64 * 1024)
                    if not chunk:
                        break
                    fh.write(chunk)
            os.replace(tmp_path, target)
        except OSError as exc:
            raise AssetError(f"cannot store asset {safe}: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)
        _logger.debug(f"Stored asset {name}")
        return name

    def remove(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            _logger.debug(f"Asset {name} already absent")
            return
        except OSError as exc:
            raise AssetError(f"cannot delete asset {name}: {exc}") from exc
        _logger.info(f"Deleted asset {name}")

    def discard(self, name: str | None) -> None:
        """Best-effort removal for cleanup paths; never raises."""

        if not name:
            return
        try:
            self.remove(name)
        except (AssetError, ValidationError) as exc:
            _logger.warning(f"Orphan cleanup failed: {exc}")
