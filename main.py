from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from review_processor.exceptions import ReviewProcessorError
from review_processor.services.review_processor import ReviewBatchProcessor
from review_processor.services.sentiment_api import SentimentAPIClient
from review_processor.utils.csv_utils import TEMPLATE_CSV
from review_processor.logconf import logger
from pathlib import Path
from typing import AsyncIterator, Optional

app = FastAPI()

class ProcessRequest(BaseModel):
    input_path: str
    output_path: str
    category: Optional[str] = None

async def get_processor() -> AsyncIterator[ReviewBatchProcessor]:
    async with SentimentAPIClient() as api:
        yield ReviewBatchProcessor(api, store=api)

@app.post("/process_reviews/")
async def process_reviews_endpoint(
    request: ProcessRequest,
    processor: ReviewBatchProcessor = Depends(get_processor),
):
    try:
        input_p = Path(request.input_path)
        output_p = Path(request.output_path)

        # Ensure the output directory exists
        output_p.parent.mkdir(parents=True, exist_ok=True)

        summary = await processor.run(input_p, output_p, request.category)
        return {
            "message": f"Analyzed {summary['total']} reviews. Output: {request.output_path}",
            "summary": summary,
            "confidence_distribution": processor.reconciler.confidence_distribution(),
        }
    except FileNotFoundError:
        logger.error(f"Input file not found: {request.input_path}")
        return {"error": f"Input file not found: {request.input_path}"}
    except ReviewProcessorError as e:
        logger.error(f"Processing failed: {e}")
        return {"error": str(e)}

@app.get("/template", response_class=PlainTextResponse)
async def template():
    return PlainTextResponse(
        TEMPLATE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="reviews_template.csv"'},
    )

@app.get("/")
async def root():
    return {"message": "Review Processor API is running."}
