"""
Canonical list of processed reviews and the filtered view the user edits.

Every edit or save made against the filtered view is resolved to the entry
object itself, never to a recomputed position in the canonical list. A save
captures that object (and the label being saved) before awaiting the store,
so whatever happens to the view or the list meanwhile, the completion lands
on the entry the user acted on.
"""

from __future__ import annotations

from typing import Protocol, Sequence

import pandas as pd

from review_processor.exceptions import LengthMismatchError, NotFoundError, SaveError
from review_processor.logconf import logger
from review_processor.models.review_entry import (
    ExportRow,
    Label,
    Prediction,
    ProcessedEntry,
    ReviewRow,
)
from review_processor.settings import settings

EXPORT_COLUMNS = ["reviews", "sentiment", "confidence_score", "corrected_sentiment"]

# (label, min, max) with min <= confidence < max
CONFIDENCE_BUCKETS = [
    ("50-60%", 0.5, 0.6),
    ("60-70%", 0.6, 0.7),
    ("70-80%", 0.7, 0.8),
    ("80-90%", 0.8, 0.9),
    ("90-100%", 0.9, 1.0),
]


class CorrectionStore(Protocol):
    async def save_correction(
        self, text: str, original_label: Label, corrected_label: Label
    ) -> None: ...


class ReviewReconciler:
    def __init__(self, store: CorrectionStore | None = None) -> None:
        self._store = store
        self._entries: list[ProcessedEntry] = []
        self._generation = 0
        self._filter_active = False
        self._threshold = settings.confidence_threshold
        self._view_key: tuple[int, bool, float] | None = None
        self._view: list[ProcessedEntry] = []

    # ------------------------------------------------------------------ #
    # Canonical list
    # ------------------------------------------------------------------ #
    @property
    def entries(self) -> tuple[ProcessedEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def ingest(
        self, rows: Sequence[ReviewRow], predictions: Sequence[Prediction]
    ) -> list[ProcessedEntry]:
        """Replace the canonical list with one entry per (row, prediction) pair."""
        if len(rows) != len(predictions):
            raise LengthMismatchError(len(rows), len(predictions))

        self._entries = [
            ProcessedEntry(
                text=row.reviews,
                predicted_label=pred.label,
                confidence=round(float(pred.confidence), 2),
            )
            for row, pred in zip(rows, predictions)
        ]
        self._generation += 1
        self._view_key = None
        logger.info("Ingested %d reviews (generation %d)", len(self._entries), self._generation)
        return list(self._entries)

    # ------------------------------------------------------------------ #
    # Filtered view
    # ------------------------------------------------------------------ #
    def set_filter(self, active: bool, threshold: float | None = None) -> None:
        self._filter_active = bool(active)
        if threshold is not None:
            self._threshold = float(threshold)

    @property
    def filter_active(self) -> bool:
        return self._filter_active

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def view(self) -> tuple[ProcessedEntry, ...]:
        return tuple(self.filtered_view())

    def filtered_view(self) -> list[ProcessedEntry]:
        key = (self._generation, self._filter_active, self._threshold)
        if self._view_key != key:
            if self._filter_active:
                self._view = [e for e in self._entries if e.confidence < self._threshold]
            else:
                self._view = list(self._entries)
            self._view_key = key
        return self._view

    def _resolve(self, view_index: int) -> ProcessedEntry:
        """
        Map a view index to the entry object it shows.

        The membership check guards the invariant that the view only holds
        entries of the current list; the generation-keyed memo keeps it true.
        """
        view = self.filtered_view()
        if not 0 <= view_index < len(view):
            raise NotFoundError(f"view index {view_index} out of range (view has {len(view)} entries)")
        entry = view[view_index]
        if not any(e is entry for e in self._entries):
            raise NotFoundError(f"entry at view index {view_index} is no longer in the result set")
        return entry

    # ------------------------------------------------------------------ #
    # Edits
    # ------------------------------------------------------------------ #
    def apply_correction(self, view_index: int, new_label: Label | str) -> ProcessedEntry:
        entry = self._resolve(view_index)
        entry.corrected_label = Label(new_label)
        entry.is_dirty = entry.corrected_label != entry.predicted_label
        entry.is_persisted = False
        return entry

    async def save_correction(self, view_index: int) -> ProcessedEntry:
        if self._store is None:
            raise SaveError("no correction store configured")

        entry = self._resolve(view_index)
        label = entry.corrected_label
        try:
            await self._store.save_correction(entry.text, entry.predicted_label, label)
        except Exception as exc:
            logger.error("Saving correction failed for %r: %s", entry.text[:60], exc)
            raise SaveError(str(exc)) from exc

        # last completed save wins: the stored value is `label`, whatever
        # was saved before
        entry.persisted_label = label
        entry.is_persisted = entry.corrected_label == label
        entry.is_dirty = entry.corrected_label != entry.predicted_label and not entry.is_persisted
        return entry

    def pending_corrections(self) -> list[ProcessedEntry]:
        return [e for e in self._entries if e.is_dirty]

    # ------------------------------------------------------------------ #
    # Export & stats
    # ------------------------------------------------------------------ #
    def export_rows(self) -> list[ExportRow]:
        return [
            ExportRow(e.text, e.predicted_label, e.confidence, e.corrected_label)
            for e in self._entries
        ]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                (r.text, r.label.value, r.confidence, r.corrected_label.value)
                for r in self.export_rows()
            ],
            columns=EXPORT_COLUMNS,
        )

    def export_csv(self) -> str:
        return self.to_dataframe().to_csv(index=False, lineterminator="\n")

    def stats(self) -> dict[str, int]:
        counts = {label.value: 0 for label in Label}
        for e in self._entries:
            counts[e.predicted_label.value] += 1
        return {
            "total": len(self._entries),
            **counts,
            "low_confidence": sum(1 for e in self._entries if e.confidence < self._threshold),
            "dirty": sum(1 for e in self._entries if e.is_dirty),
            "persisted": sum(1 for e in self._entries if e.is_persisted),
        }

    def confidence_distribution(self) -> dict[str, int]:
        return {
            name: sum(1 for e in self._entries if lo <= e.confidence < hi)
            for name, lo, hi in CONFIDENCE_BUCKETS
        }
