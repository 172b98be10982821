import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Metrics repository (external collaborator)
    METRICS_API_URL = os.getenv("METRICS_API_URL", "http://localhost:5000/api")
    METRICS_API_TIMEOUT = float(os.getenv("METRICS_API_TIMEOUT", "10"))

    # Caller-side score cache
    SCORE_CACHE_MAX_ENTRIES = int(os.getenv("SCORE_CACHE_MAX_ENTRIES", "500"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
