from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class SearchQuery:
    q: str
    limit: Optional[int] = None  # None -> Config.limit


# -----------------------
# Remote API schema
# -----------------------


class MediaFormat(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    content_description: Optional[str] = None
    item_url: Optional[str] = Field(default=None, alias="itemurl")
    media_formats: dict[str, MediaFormat] = Field(default_factory=dict)

    def media_url(self, quality: str) -> Optional[str]:
        fmt = self.media_formats.get(quality)
        return fmt.url if fmt else None


class SearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: list[SearchResult]


class AutocompleteResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: list[str]


# -----------------------
# Enriched launcher items
# -----------------------


@dataclass(frozen=True)
class ModAction:
    arg: str
    subtitle: str
    valid: bool = True


@dataclass(frozen=True)
class EnrichedItem:
    title: str
    subtitle: Optional[str] = None
    uid: Optional[str] = None
    arg: Optional[str] = None
    autocomplete: Optional[str] = None
    icon_path: Optional[str] = None
    quicklook_url: Optional[str] = None
    alt: Optional[ModAction] = None
    cmd: Optional[ModAction] = None
    valid: bool = True

    @classmethod
    def placeholder(cls, title: str, subtitle: str) -> "EnrichedItem":
        """non-actionable item used for "no results" / "failed" messages"""
        return cls(title=title, subtitle=subtitle, valid=False)
