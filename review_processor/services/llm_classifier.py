import asyncio, json, math, re
from typing import Sequence
from openai import AsyncOpenAI
from review_processor.exceptions import TransportError
from review_processor.models.review_entry import Label, Prediction
from review_processor.settings import settings
from review_processor.logconf import logger

class LLMSentimentClassifier:
    """Classifies reviews with an OpenAI chat model, one request per review."""

    _prompt_tmpl = """
Classify the sentiment of this customer review about {category}.

Review: "{review}"

Rules:
- positive: the reviewer is satisfied overall, even with minor complaints.
- negative: the reviewer is dissatisfied overall, even with minor praise.
- neutral: mixed, factual or unclear reviews.
- confidence is your certainty between 0 and 1.

Respond ONLY in JSON:
{{
  "sentiment": "positive",
  "confidence": 0.9
}}
"""

    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self._client = client or (
            AsyncOpenAI(api_key=settings.openai_api_key)
            if settings.openai_api_key else None
        )
        self.sem = asyncio.Semaphore(settings.max_concurrency)

    @staticmethod
    def _parse(txt: str) -> Prediction:
        json_match = re.search(r"```json\s*(\{.*?\})\s*```", txt, re.DOTALL)
        data = json.loads(json_match.group(1) if json_match else txt)
        confidence = float(data.get("confidence", 0.0))
        if math.isnan(confidence):
            raise ValueError("confidence is NaN")
        confidence = min(max(confidence, 0.0), 1.0)
        return Prediction(Label.coerce(data.get("sentiment")), confidence)

    async def _classify_one(self, review: str, category: str) -> Prediction:
        review = (review or "").strip()
        if not review:
            return Prediction(Label.NEUTRAL, 0.0)

        prompt = self._prompt_tmpl.format(review=review.replace('"', "'"), category=category)
        async with self.sem:
            resp = await self._client.chat.completions.create(
                model=settings.openai_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.0,
                max_tokens=60,
            )
        txt = (resp.choices[0].message.content or "").strip()
        try:
            return self._parse(txt)
        except (ValueError, TypeError, AttributeError) as e:
            # a single unreadable answer should not sink the whole batch
            logger.warning("Unreadable LLM answer for %r: %s", review[:60], e)
            return Prediction(Label.NEUTRAL, 0.0)

    async def classify(self, texts: Sequence[str], category: str) -> list[Prediction]:
        if not self._client:
            raise TransportError("no OpenAI API key configured")
        try:
            return list(await asyncio.gather(
                *(self._classify_one(t, category) for t in texts)
            ))
        except Exception as e:
            logger.error("Sentiment LLM error: %s", e, exc_info=True)
            raise TransportError(f"LLM classification failed: {e}") from e
