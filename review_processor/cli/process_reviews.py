import asyncio, argparse, sys
from pathlib import Path
from review_processor.exceptions import ReviewProcessorError
from review_processor.services.llm_classifier import LLMSentimentClassifier
from review_processor.services.review_processor import ReviewBatchProcessor
from review_processor.services.sentiment_api import SentimentAPIClient
from review_processor.settings import settings
from review_processor.utils.csv_utils import TEMPLATE_CSV
from review_processor.logconf import logger

async def _run(args: argparse.Namespace) -> dict:
    if args.backend == "llm":
        processor = ReviewBatchProcessor(LLMSentimentClassifier())
        return await processor.run(Path(args.input), Path(args.output), args.category)

    async with SentimentAPIClient(base_url=args.api_url) as api:
        processor = ReviewBatchProcessor(api, store=api)
        return await processor.run(Path(args.input), Path(args.output), args.category)

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Classify a CSV of reviews and export the results."
    )
    parser.add_argument("-i", "--input", default="data/reviews.csv")
    parser.add_argument("-o", "--output", default="data/processed_reviews.csv")
    parser.add_argument("--category", default=settings.default_category,
                        help="Review category passed to the classifier")
    parser.add_argument("--backend", choices=("api", "llm"), default="api",
                        help="Sentiment backend: HTTP API or OpenAI model")
    parser.add_argument("--api-url", help="Override the sentiment API base URL")
    parser.add_argument("--template", action="store_true",
                        help="Write an empty upload template to --output and exit")
    args = parser.parse_args(argv)

    if args.template:
        Path(args.output).write_text(TEMPLATE_CSV, encoding="utf-8")
        logger.info("Template written to %s", args.output)
        return 0

    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except (ReviewProcessorError, FileNotFoundError) as exc:
        logger.error("Processing failed: %s", exc)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
