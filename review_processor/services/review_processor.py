"""
Orchestrates CSV IO, the classifier and the correction reconciler.
"""

from __future__ import annotations

from pathlib import Path

from review_processor.exceptions import ParseEmptyError
from review_processor.logconf import logger
from review_processor.models.review_entry import ReviewRow
from review_processor.services.reconciler import CorrectionStore, ReviewReconciler
from review_processor.services.sentiment_api import Classifier
from review_processor.settings import settings
from review_processor.utils.csv_utils import parse_csv, read_csv_text, write_csv


class ReviewBatchProcessor:
    def __init__(
        self,
        classifier: Classifier,
        store: CorrectionStore | None = None,
        reconciler: ReviewReconciler | None = None,
    ) -> None:
        self.classifier = classifier
        self.reconciler = reconciler or ReviewReconciler(store)

    @staticmethod
    def load_text(text: str) -> list[ReviewRow]:
        records = parse_csv(text)
        if not records:
            raise ParseEmptyError("File is empty")
        return [ReviewRow.from_record(r) for r in records]

    def load(self, path: str | Path) -> list[ReviewRow]:
        rows = self.load_text(read_csv_text(path))
        logger.info("%d reviews ready for processing (%s)", len(rows), path)
        return rows

    async def process(self, rows: list[ReviewRow], category: str | None = None) -> None:
        """
        Classify every row and hand the results to the reconciler. Any
        failure propagates before the reconciler is touched.
        """
        category = category or settings.default_category
        predictions = await self.classifier.classify([r.reviews for r in rows], category)
        self.reconciler.ingest(rows, predictions)

    async def run(
        self,
        input_path: str | Path,
        output_path: str | Path,
        category: str | None = None,
    ) -> dict[str, int]:
        rows = self.load(input_path)
        await self.process(rows, category)
        await write_csv(self.reconciler.to_dataframe(), output_path)

        summary = self.reconciler.stats()
        logger.info(
            "Analyzed %d reviews (%s → %s): %d positive, %d negative, %d neutral, %d low confidence",
            summary["total"], input_path, output_path,
            summary["positive"], summary["negative"], summary["neutral"],
            summary["low_confidence"],
        )
        return summary
