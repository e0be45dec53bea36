from __future__ import annotations

"""Value types shared by the session engine, content import and history.

Study items are plain question/answer pairs. Generated alternate forms
(reversed prompt, fill-in-blank, multiple choice, ...) carry a
``VariantExtension`` and, when they belong to a primary item, a ``FlowMeta``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4


class StudyMode(str, Enum):
    TREADMILL = "treadmill"  # timed Q/A
    READING = "reading"
    QUIZ = "quiz"
    FREE = "free"  # untimed, tap-to-reveal


class VariantKind(str, Enum):
    REVERSE = "reverse"
    FILL_IN_BLANK = "fill_in_blank"
    ASSOCIATIVE = "associative"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"


class FlowRole(str, Enum):
    VERTICAL = "vertical"
    LATERAL = "lateral"


class TimeoutPolicy(str, Enum):
    MISS = "miss"
    SKIP = "skip"


@dataclass(frozen=True)
class VariantExtension:
    kind: VariantKind
    choices: Tuple[str, ...] = ()
    correct_index: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", tuple(self.choices))

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "choices": list(self.choices)}
        if self.correct_index is not None:
            data["correct_index"] = self.correct_index
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "VariantExtension":
        return cls(
            kind=VariantKind(data["kind"]),
            choices=tuple(str(c) for c in data.get("choices", [])),
            correct_index=data.get("correct_index"),
        )


@dataclass(frozen=True)
class FlowMeta:
    """Position of an item in a vertical/lateral study flow.

    Lateral items are alternates of a primary (vertical) item; ``position``
    is their index among ``sibling_count`` siblings.
    """

    role: FlowRole = FlowRole.VERTICAL
    parent_id: Optional[str] = None
    position: int = 0
    sibling_count: int = 0

    def __post_init__(self) -> None:
        if self.role == FlowRole.LATERAL:
            if not self.parent_id:
                raise ValueError("lateral items need a parent_id")
            if not (0 <= self.position < self.sibling_count):
                raise ValueError(
                    f"lateral position {self.position} out of range for {self.sibling_count} siblings"
                )

    @property
    def is_lateral(self) -> bool:
        return self.role == FlowRole.LATERAL

    def to_json(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "parent_id": self.parent_id,
            "position": self.position,
            "sibling_count": self.sibling_count,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "FlowMeta":
        return cls(
            role=FlowRole(data.get("role", "vertical")),
            parent_id=data.get("parent_id"),
            position=int(data.get("position", 0)),
            sibling_count=int(data.get("sibling_count", 0)),
        )


@dataclass(frozen=True)
class StudyItem:
    question: str
    answer: str
    id: str = field(default_factory=lambda: str(uuid4()))
    course: str = ""
    chapter: str = ""
    variant: Optional[VariantExtension] = None
    flow: Optional[FlowMeta] = None
    image_url: Optional[str] = None
    additional_info: Optional[str] = None

    def __post_init__(self) -> None:
        v = self.variant
        if v is None:
            return
        if v.kind == VariantKind.MULTIPLE_CHOICE:
            if not v.choices:
                raise ValueError(f"multiple-choice item {self.id!r} has no choices")
            if self.answer not in v.choices:
                raise ValueError(f"multiple-choice item {self.id!r}: answer not among choices")
        if v.correct_index is not None:
            if not (0 <= v.correct_index < len(v.choices)):
                raise ValueError(f"item {self.id!r}: correct_index out of range")
            if v.choices[v.correct_index] != self.answer:
                raise ValueError(f"item {self.id!r}: correct_index does not point at the answer")

    @property
    def choices(self) -> List[str]:
        return list(self.variant.choices) if self.variant else []

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "course": self.course,
            "chapter": self.chapter,
        }
        if self.variant is not None:
            data["variant"] = self.variant.to_json()
        if self.flow is not None:
            data["flow"] = self.flow.to_json()
        if self.image_url is not None:
            data["image_url"] = self.image_url
        if self.additional_info is not None:
            data["additional_info"] = self.additional_info
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StudyItem":
        variant = data.get("variant")
        flow = data.get("flow")
        return cls(
            id=str(data.get("id") or uuid4()),
            question=str(data["question"]),
            answer=str(data["answer"]),
            course=str(data.get("course", "")),
            chapter=str(data.get("chapter", "")),
            variant=VariantExtension.from_json(variant) if variant else None,
            flow=FlowMeta.from_json(flow) if flow else None,
            image_url=data.get("image_url"),
            additional_info=data.get("additional_info"),
        )


@dataclass(frozen=True)
class SessionConfig:
    question_duration: int = 5
    answer_duration: int = 5
    shuffle: bool = False
    unjudged_timeout: TimeoutPolicy = TimeoutPolicy.MISS

    def __post_init__(self) -> None:
        for name in ("question_duration", "answer_duration"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.unjudged_timeout, TimeoutPolicy):
            object.__setattr__(self, "unjudged_timeout", TimeoutPolicy(self.unjudged_timeout))

    @property
    def max_duration(self) -> int:
        return max(self.question_duration, self.answer_duration)


@dataclass(frozen=True)
class SessionSummary:
    mode: StudyMode
    course: Optional[str]
    chapter: Optional[str]
    started_at: datetime
    duration_s: float
    score: int
    missed: int
    total: int = 0
    completed: bool = True
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def answered(self) -> int:
        return self.score + self.missed

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "mode": self.mode.value,
            "course": self.course,
            "chapter": self.chapter,
            "started_at": self.started_at.isoformat(),
            "duration_s": self.duration_s,
            "score": self.score,
            "missed": self.missed,
            "total": self.total,
            "completed": self.completed,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SessionSummary":
        started = datetime.fromisoformat(str(data["started_at"]))
        if started.tzinfo is None:
            started = started.replace(tzinfo=timezone.utc)
        return cls(
            id=str(data.get("id") or uuid4()),
            mode=StudyMode(data.get("mode", "treadmill")),
            course=data.get("course"),
            chapter=data.get("chapter"),
            started_at=started,
            duration_s=float(data.get("duration_s", 0.0)),
            score=int(data.get("score", 0)),
            missed=int(data.get("missed", 0)),
            total=int(data.get("total", 0)),
            completed=bool(data.get("completed", True)),
        )


@dataclass(frozen=True)
class ReaderChapter:
    course: str
    chapter: str
    paragraphs: Tuple[str, ...] = ()
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        object.__setattr__(self, "paragraphs", tuple(self.paragraphs))

    @property
    def text(self) -> str:
        return "\n\n".join(self.paragraphs)
