from __future__ import annotations
from typing import Optional, Sequence

from pydantic import BaseModel

from .models import EnrichedItem, ModAction

SUGGESTION_CACHE_SECONDS = 3600


# -----------------------
# Alfred Script Filter JSON
# -----------------------


class AlfredIcon(BaseModel):
    path: str


class AlfredModAction(BaseModel):
    valid: bool
    arg: str
    subtitle: str


class AlfredMods(BaseModel):
    alt: AlfredModAction
    cmd: AlfredModAction


class AlfredItem(BaseModel):
    uid: Optional[str] = None
    title: str
    subtitle: Optional[str] = None
    arg: Optional[str] = None
    autocomplete: Optional[str] = None
    icon: Optional[AlfredIcon] = None
    quicklookurl: Optional[str] = None
    valid: bool = True
    mods: Optional[AlfredMods] = None


class AlfredCache(BaseModel):
    seconds: int


class AlfredOutput(BaseModel):
    cache: Optional[AlfredCache] = None
    items: list[AlfredItem]

    def render(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)


def _mod(action: ModAction) -> AlfredModAction:
    return AlfredModAction(valid=action.valid, arg=action.arg, subtitle=action.subtitle)


def to_alfred_item(item: EnrichedItem) -> AlfredItem:
    mods = None
    if item.alt is not None and item.cmd is not None:
        mods = AlfredMods(alt=_mod(item.alt), cmd=_mod(item.cmd))
    return AlfredItem(
        uid=item.uid,
        title=item.title,
        subtitle=item.subtitle,
        arg=item.arg,
        autocomplete=item.autocomplete,
        icon=AlfredIcon(path=item.icon_path) if item.icon_path else None,
        quicklookurl=item.quicklook_url,
        valid=item.valid,
        mods=mods,
    )


def build_output(items: Sequence[EnrichedItem]) -> AlfredOutput:
    # 順序はそのまま（並べ替えない）
    return AlfredOutput(items=[to_alfred_item(i) for i in items])


def render_items(items: Sequence[EnrichedItem]) -> str:
    return build_output(items).render()


def usage_items() -> list[EnrichedItem]:
    return [
        EnrichedItem.placeholder(
            "Usage: gif-search <search term>", "Please provide a search term for GIFs."
        )
    ]


def build_suggestions(query: str, suggestions: Sequence[str]) -> AlfredOutput:
    """入力中のクエリを先頭に、重複を除いた候補を続ける"""
    items = [AlfredItem(title=query, arg=query, valid=True)]
    seen = {query}
    for s in suggestions:
        if s in seen:
            continue
        seen.add(s)
        items.append(AlfredItem(title=s, arg=s, valid=True))
    return AlfredOutput(cache=AlfredCache(seconds=SUGGESTION_CACHE_SECONDS), items=items)


def render_suggestions(query: str, suggestions: Sequence[str]) -> str:
    return build_suggestions(query, suggestions).render()
