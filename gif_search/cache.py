from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path

import httpx

from .concurrency import KeyedLock
from .errors import InvalidContentError, PersistenceError, RemoteFetchError
from .url_utils import last_path_segment

from logging import getLogger

logger = getLogger(__name__)

GIF_SIGNATURE = "GIF"
_HEADER_LEN = 6  # "GIF89a" / "GIF87a"


@dataclass(frozen=True)
class MediaCacheConfig:
    dir_path: str = "cache"


def looks_like_gif(data: bytes) -> bool:
    if len(data) < _HEADER_LEN:
        return False
    try:
        header = data[:_HEADER_LEN].decode("ascii")
    except UnicodeDecodeError:
        return False
    return header.startswith(GIF_SIGNATURE)


class MediaCacheStore:
    """
    remote URL -> ファイル
    - ファイル名は URL のパス末尾そのまま（ハッシュしない。衝突は稀なので許容）
    - ファイルが存在すること自体が「キャッシュ済み」の印。メタデータは持たない。
    - 書き込みは tmp -> rename で、途中のファイルは見えない。
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cfg: MediaCacheConfig = MediaCacheConfig(),
        *,
        timeout_s: float = 15.0,
    ) -> None:
        self._client = client
        self._dir = Path(cfg.dir_path)
        self._timeout_s = timeout_s
        self._locks = KeyedLock()
        self.fetch_count = 0
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"cannot create cache dir {self._dir}: {e}") from e

    def cached_path(self, url: str) -> Path:
        name = last_path_segment(url)
        # ディレクトリを指す名前・ディレクトリ外に出る名前は弾く
        if name in {"", ".", ".."} or "/" in name or "\\" in name:
            raise InvalidContentError(f"cannot derive a cache filename from {url!r}")
        return self._dir / name

    async def ensure_cached(self, url: str) -> Path:
        path = self.cached_path(url)
        if path.is_file():
            logger.debug(f"cache hit: {path.name}")
            return path

        # 同じファイル名の同時取得は1本にまとめる
        async with self._locks.hold(path.name):
            if path.is_file():
                logger.debug(f"cache hit after wait: {path.name}")
                return path
            data = await self._download(url)
            self._commit(path, data)
            logger.info(f"cached {url} -> {path}")
            return path

    async def _download(self, url: str) -> bytes:
        self.fetch_count += 1
        try:
            r = await self._client.get(
                url, follow_redirects=True, timeout=self._timeout_s
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteFetchError(-1, url) from e

        if r.status_code != 200:
            raise RemoteFetchError(r.status_code, url)

        data = r.content
        if not looks_like_gif(data):
            raise InvalidContentError(f"not a GIF payload: {url}")
        return data

    def _commit(self, path: Path, data: bytes) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            # 実行中に外部から消されても作り直す
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError as e:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"could not remove temp file {tmp}")
            raise PersistenceError(f"failed to write {path}: {e}") from e
