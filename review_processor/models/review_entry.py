from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class Label(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL  = "neutral"

    @classmethod
    def coerce(cls, value: object, default: "Label | None" = None) -> "Label":
        """Parse a label case-insensitively; unknown values fall back to `default`."""
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            if default is None:
                raise
            return default


@dataclass
class ReviewRow:
    """One uploaded row after field coercion."""
    reviews: str
    sentiment: Label = Label.NEUTRAL
    confidence_score: float = 0.0

    @classmethod
    def from_record(cls, record: Mapping[str, str]) -> "ReviewRow":
        try:
            confidence = float(record.get("confidence_score") or 0)
        except ValueError:
            confidence = 0.0
        return cls(
            reviews=str(record.get("reviews") or ""),
            sentiment=Label.coerce(record.get("sentiment"), Label.NEUTRAL),
            confidence_score=confidence,
        )


@dataclass(frozen=True)
class Prediction:
    label: Label
    confidence: float


# eq=False keeps identity comparison: two reviews with the same text and
# labels are still different entries.
@dataclass(eq=False)
class ProcessedEntry:
    text: str
    predicted_label: Label
    confidence: float
    corrected_label: Label = field(init=False)
    is_dirty: bool = False
    is_persisted: bool = False
    persisted_label: Label | None = None

    def __post_init__(self) -> None:
        self.corrected_label = self.predicted_label


@dataclass(frozen=True)
class ExportRow:
    text: str
    label: Label
    confidence: float
    corrected_label: Label
