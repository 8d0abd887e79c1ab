"""
Async client for the sentiment backend (batch/single prediction, corrections).
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

import httpx

from review_processor.exceptions import LengthMismatchError, TransportError
from review_processor.logconf import logger
from review_processor.models.review_entry import Label, Prediction
from review_processor.settings import settings


class Classifier(Protocol):
    async def classify(self, texts: Sequence[str], category: str) -> list[Prediction]: ...


def _to_prediction(item: Any) -> Prediction:
    try:
        label = Label.coerce(item["sentiment"])
        confidence = float(item["confidence"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TransportError(f"malformed prediction {item!r}: {exc}") from exc
    # also rejects NaN
    if not 0.0 <= confidence <= 1.0:
        raise TransportError(f"malformed prediction {item!r}: confidence outside [0, 1]")
    return Prediction(label=label, confidence=confidence)


class SentimentAPIClient:
    """Isolated service ─ can be mocked in tests (pass an httpx.AsyncClient)."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=settings.request_timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SentimentAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            resp = await self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Sentiment API unreachable (%s): %s", path, exc)
            raise TransportError(f"request to {path} failed: {exc}") from exc
        if not resp.is_success:
            logger.error("Sentiment API error %s on %s", resp.status_code, path)
            raise TransportError(f"API error: {resp.status_code}", status_code=resp.status_code)
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"response is not JSON: {exc}") from exc

    async def classify(self, texts: Sequence[str], category: str) -> list[Prediction]:
        resp = await self._post(
            settings.predict_batch_path,
            {"reviews": list(texts), "category": category},
        )
        data = self._json(resp)
        raw = data.get("predictions") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            raise TransportError("response has no 'predictions' list")
        if len(raw) != len(texts):
            raise LengthMismatchError(len(texts), len(raw))
        return [_to_prediction(item) for item in raw]

    async def predict(self, text: str, category: str) -> Prediction:
        resp = await self._post(settings.predict_path, {"review": text, "category": category})
        return _to_prediction(self._json(resp))

    async def save_correction(
        self, text: str, original_label: Label, corrected_label: Label
    ) -> None:
        await self._post(
            settings.corrections_path,
            {
                "review": text,
                "originalSentiment": Label(original_label).value,
                "correctedSentiment": Label(corrected_label).value,
            },
        )
