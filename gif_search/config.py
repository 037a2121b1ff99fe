from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import MissingCredentialError

DEFAULT_API_BASE_URL = "https://tenor.googleapis.com/v2/"
PLACEHOLDER_API_KEY = "PLACEHOLDER_API_KEY"


@dataclass(frozen=True)
class Config:
    api_key: str
    api_base_url: str = DEFAULT_API_BASE_URL
    limit: int = 5
    preview_quality: str = "nanogif"
    output_quality: str = "tinygif"
    cache_enabled: bool = True
    cache_dir: Path = Path("cache")
    fallback_icon: Path = Path("icon.png")
    timeout_s: float = 15.0
    # None = 1 result 1 task (上限なし)
    max_concurrency: Optional[int] = None


def require_api_key(key: Optional[str]) -> str:
    if not key or key == PLACEHOLDER_API_KEY:
        raise MissingCredentialError()
    return key


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def load_config(workflow_dir: Optional[Path] = None) -> Config:
    """環境変数 -> Config（相対パスは workflow_dir 基準。API key の検証は engine 側）"""
    if workflow_dir is None:
        workflow_dir = Path(sys.argv[0]).resolve().parent

    max_conc = _env_int("MAX_CONCURRENCY", 0)

    return Config(
        api_key=os.getenv("API_KEY", ""),
        api_base_url=os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL),
        limit=_env_int("MAX_RESULTS", 5),
        preview_quality=os.getenv("PREVIEW_QUALITY", "nanogif"),
        output_quality=os.getenv("OUTPUT_QUALITY", "tinygif"),
        cache_enabled=os.getenv("CACHE_ENABLED", "true").lower() == "true",
        cache_dir=workflow_dir / os.getenv("CACHE_DIR_NAME", "cache"),
        fallback_icon=(workflow_dir / os.getenv("FALLBACK_ICON", "./icon.png")).resolve(),
        timeout_s=_env_float("REQUEST_TIMEOUT_S", 15.0),
        max_concurrency=max_conc if max_conc > 0 else None,
    )
