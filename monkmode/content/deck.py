from __future__ import annotations

"""Content import: flashcard decks and reader chapters from JSON text.

Two shapes are accepted:

- bulk import: a JSON array of ``{"question", "answer", "imageUrl"?,
  "additionalInfo"?}`` objects, all filed under one course/chapter;
- seed document: ``{"flashcards": [...], "chapters": [...]}`` where each
  flashcard carries its own course/chapter and optionally a ``type``
  (``standard``, ``multipleChoice``, ``fillInBlank``, ``trueFalse``),
  ``choices``, ``correctIndex`` and ``flow`` metadata.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models import FlowMeta, ReaderChapter, StudyItem, VariantExtension, VariantKind


class ContentError(ValueError):
    """Raised when imported content cannot be parsed into items."""


_TYPE_TO_KIND = {
    "multipleChoice": VariantKind.MULTIPLE_CHOICE,
    "fillInBlank": VariantKind.FILL_IN_BLANK,
    "trueFalse": VariantKind.TRUE_FALSE,
    "reverse": VariantKind.REVERSE,
    "associative": VariantKind.ASSOCIATIVE,
}


class PartialCard(BaseModel):
    question: str = Field(min_length=1)
    answer: str
    imageUrl: Optional[str] = None
    additionalInfo: Optional[str] = None


class FlowPayload(BaseModel):
    role: str = "vertical"
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    position: int = 0
    sibling_count: int = Field(default=0, alias="siblingCount")

    model_config = ConfigDict(populate_by_name=True)


class CardPayload(PartialCard):
    id: Optional[str] = None
    course: str = ""
    chapter: str = ""
    type: str = "standard"
    choices: Optional[List[str]] = None
    correctIndex: Optional[int] = None
    flow: Optional[FlowPayload] = None


class ChapterPayload(BaseModel):
    id: Optional[str] = None
    course: str
    chapter: str
    paragraphs: List[str] = Field(default_factory=list)


class SeedPayload(BaseModel):
    flashcards: List[CardPayload] = Field(default_factory=list)
    chapters: List[ChapterPayload] = Field(default_factory=list)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ContentError(f"invalid JSON: {exc}") from exc


def _card_to_item(card: CardPayload) -> StudyItem:
    variant = None
    if card.type != "standard":
        kind = _TYPE_TO_KIND.get(card.type)
        if kind is None:
            raise ContentError(f"unknown card type: {card.type!r}")
        variant = VariantExtension(kind=kind, choices=tuple(card.choices or ()), correct_index=card.correctIndex)
    flow = None
    if card.flow is not None:
        flow = FlowMeta.from_json(card.flow.model_dump())
    kwargs: Dict[str, Any] = {}
    if card.id:
        kwargs["id"] = card.id
    return StudyItem(
        question=card.question,
        answer=card.answer,
        course=card.course,
        chapter=card.chapter,
        variant=variant,
        flow=flow,
        image_url=card.imageUrl,
        additional_info=card.additionalInfo,
        **kwargs,
    )


def import_bulk_json(text: str, course: str, chapter: str) -> List[StudyItem]:
    """Parse a bulk-import array and file every card under course/chapter."""
    data = _parse_json(text)
    if not isinstance(data, list):
        raise ContentError("bulk import expects a JSON array of cards")
    try:
        partials = [PartialCard.model_validate(entry) for entry in data]
    except ValidationError as exc:
        raise ContentError(f"bulk import failed: {exc}") from exc
    return [
        StudyItem(
            question=p.question,
            answer=p.answer,
            course=course,
            chapter=chapter,
            image_url=p.imageUrl,
            additional_info=p.additionalInfo,
        )
        for p in partials
    ]


def load_seed(text: str) -> "Deck":
    """Parse a seed document into a Deck of items and reader chapters."""
    data = _parse_json(text)
    if isinstance(data, list):
        # a bare array of full cards
        data = {"flashcards": data}
    try:
        seed = SeedPayload.model_validate(data)
    except ValidationError as exc:
        raise ContentError(f"seed document invalid: {exc}") from exc
    try:
        items = [_card_to_item(c) for c in seed.flashcards]
    except ValueError as exc:
        if isinstance(exc, ContentError):
            raise
        raise ContentError(str(exc)) from exc
    chapters = [
        ReaderChapter(course=c.course, chapter=c.chapter, paragraphs=tuple(c.paragraphs), **({"id": c.id} if c.id else {}))
        for c in seed.chapters
    ]
    return Deck(items, chapters)


class Deck:
    """In-memory collection of study items and reader chapters."""

    def __init__(self, items: Iterable[StudyItem] = (), chapters: Iterable[ReaderChapter] = ()) -> None:
        self._items: List[StudyItem] = list(items)
        self._chapters: List[ReaderChapter] = list(chapters)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[StudyItem]:
        return list(self._items)

    @property
    def reader_chapters(self) -> List[ReaderChapter]:
        return list(self._chapters)

    def add(self, item: StudyItem) -> None:
        self._items.append(item)

    def extend(self, items: Iterable[StudyItem]) -> None:
        self._items.extend(items)

    def courses(self) -> List[str]:
        seen: Dict[str, None] = {}
        for it in self._items:
            seen.setdefault(it.course, None)
        for ch in self._chapters:
            seen.setdefault(ch.course, None)
        return list(seen)

    def chapters_for(self, course: str) -> List[str]:
        seen: Dict[str, None] = {}
        for it in self._items:
            if it.course == course:
                seen.setdefault(it.chapter, None)
        return list(seen)

    def items_for(self, course: Optional[str] = None, chapter: Optional[str] = None) -> List[StudyItem]:
        return [
            it
            for it in self._items
            if (course is None or it.course == course) and (chapter is None or it.chapter == chapter)
        ]

    def reader_chapter(self, course: str, chapter: str) -> Optional[ReaderChapter]:
        for ch in self._chapters:
            if ch.course == course and ch.chapter == chapter:
                return ch
        return None

    def lateral_variants(self, parent_id: str) -> List[StudyItem]:
        found: List[Tuple[int, StudyItem]] = [
            (it.flow.position, it)
            for it in self._items
            if it.flow is not None and it.flow.is_lateral and it.flow.parent_id == parent_id
        ]
        return [it for _, it in sorted(found, key=lambda p: p[0])]
