import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()  # load .env

class _Settings(BaseSettings):
    # Sentiment backend
    api_base_url: str       = os.getenv("API_BASE_URL", "http://localhost:5000")
    predict_batch_path: str = "/predict-batch"
    predict_path: str       = "/predict"
    corrections_path: str   = "/corrections"
    request_timeout: float  = 30.0

    # OpenAI (alternative classifier backend)
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str   = "gpt-4.1-mini"

    # Review defaults
    default_category: str       = "smartphones"
    confidence_threshold: float = 0.7     # "low confidence" cut-off

    # Runtime
    max_concurrency: int = 5      # parallel LLM calls
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = _Settings()           # singleton
