from __future__ import annotations
import posixpath
import urllib.parse

TENOR_VIEW_BASE = "https://tenor.com/view/"


def last_path_segment(url: str) -> str:
    """
    URLのパス末尾 (e.g. https://media.tenor.com/abc/foo.gif -> "foo.gif")
    - クエリ/フラグメントは無視
    - 末尾スラッシュは無視
    - 分割してからデコード（%2F は区切りにならない）
    """
    u = urllib.parse.urlsplit(url.strip())
    path = (u.path or "").rstrip("/")
    return urllib.parse.unquote(posixpath.basename(path))


def view_url(result_id: str) -> str:
    return f"{TENOR_VIEW_BASE}{urllib.parse.quote(result_id, safe='')}"


def join_api_url(base_url: str, endpoint: str) -> str:
    if not base_url.endswith("/"):
        base_url += "/"
    return urllib.parse.urljoin(base_url, endpoint)
