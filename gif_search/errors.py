from __future__ import annotations
from typing import Optional


class GifSearchError(RuntimeError):
    pass


class MissingCredentialError(GifSearchError):
    def __init__(self, message: str = "No valid API key found. Set the API_KEY environment variable.") -> None:
        super().__init__(message)


class RemoteFetchError(GifSearchError):
    def __init__(self, status_code: int, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        msg = f"HTTP error (status code {status_code})"
        if url:
            msg += f": {url}"
        super().__init__(msg)


class DecodeError(GifSearchError):
    pass


class InvalidContentError(GifSearchError):
    pass


class PersistenceError(GifSearchError):
    pass
