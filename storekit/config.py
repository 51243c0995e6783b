"""Configuration helpers for the shop backend.

Values come from the process environment, optionally primed from a ``.env``
file in the base directory. Centralising the lookup lets tests and installers
provide a plain mapping instead of patching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

from .coerce import coerce_bool
from .errors import ValidationError


@dataclass(frozen=True)
class ShopConfig:
    """Strongly typed configuration for the shop backend."""

    base_dir: Path
    data_dir: Path
    asset_dir: Path
    backups: int
    allowed_origins: tuple[str, ...]
    force_tls: bool
    strict_order_references: bool
    max_upload_mb: int

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or (
        "https://localhost",
        "https://127.0.0.1",
        "http://localhost",
        "http://127.0.0.1",
    )


def _env_flag(env_map: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env_map.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return coerce_bool(raw, name)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


def _env_int(env_map: Mapping[str, str], name: str, default: int) -> int:
    raw = (env_map.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _resolve(base_dir: Path, raw: str | None, fallback: Path) -> Path:
    if not raw:
        return fallback
    path = Path(raw).expanduser()
    return path if path.is_absolute() else base_dir / path


def load_shop_config(base_dir: Path, env: Mapping[str, str] | None = None) -> ShopConfig:
    """Load configuration from ``base_dir/.env`` and the given env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(os.environ if env is None else env)

    data_dir = _resolve(base_dir, env_map.get("DATA_DIR"), base_dir / "data")
    asset_dir = _resolve(base_dir, env_map.get("ASSET_DIR"), data_dir / "img")

    return ShopConfig(
        base_dir=base_dir,
        data_dir=data_dir,
        asset_dir=asset_dir,
        backups=max(0, _env_int(env_map, "STORE_BACKUPS", 2)),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        force_tls=_env_flag(env_map, "FORCE_TLS", False),
        strict_order_references=_env_flag(env_map, "STRICT_ORDER_REFERENCES", False),
        max_upload_mb=_env_int(env_map, "MAX_UPLOAD_MB", 5),
    )
