"""Shared fixtures for the review_processor tests."""

import asyncio

import pytest

from review_processor.models.review_entry import Label, Prediction, ReviewRow
from review_processor.services.reconciler import ReviewReconciler


class FakeStore:
    """Records every save; fails while `fail` is set."""

    def __init__(self):
        self.calls = []
        self.fail = False

    async def save_correction(self, text, original_label, corrected_label):
        self.calls.append((text, original_label, corrected_label))
        if self.fail:
            raise RuntimeError("backend down")


class GatedStore:
    """Each save blocks until the test releases it, to control completion order."""

    def __init__(self):
        self.calls = []
        self.gates = []

    async def save_correction(self, text, original_label, corrected_label):
        gate = asyncio.Event()
        self.calls.append((text, original_label, corrected_label))
        self.gates.append(gate)
        await gate.wait()


class FakeClassifier:
    def __init__(self, predictions):
        self.predictions = predictions
        self.calls = []

    async def classify(self, texts, category):
        self.calls.append((list(texts), category))
        return list(self.predictions)


@pytest.fixture
def rows():
    return [
        ReviewRow("Great phone"),
        ReviewRow("Battery died after a week"),
        ReviewRow("It is a phone"),
    ]


@pytest.fixture
def predictions():
    return [
        Prediction(Label.POSITIVE, 0.91),
        Prediction(Label.NEGATIVE, 0.3),
        Prediction(Label.NEUTRAL, 0.65),
    ]


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def reconciler(store, rows, predictions):
    rec = ReviewReconciler(store)
    rec.ingest(rows, predictions)
    return rec


@pytest.fixture
def gated_store():
    return GatedStore()


@pytest.fixture
def make_classifier():
    return FakeClassifier
