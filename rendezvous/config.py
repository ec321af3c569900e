import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    import warnings

    warnings.warn(
        "DATABASE_URL not set! Falling back to local SQLite file - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    DATABASE_URL = "sqlite:///./rendezvous.db"

# Access tokens are issued by the identity service; we only verify them
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
ACCESS_TOKEN_ALGORITHM = os.getenv("ACCESS_TOKEN_ALGORITHM", "HS256")

# Scheduling policy
MIN_OVERLAP_MINUTES = int(os.getenv("MIN_OVERLAP_MINUTES", "30"))

# Notifications
NOTIFICATION_LIST_LIMIT = int(os.getenv("NOTIFICATION_LIST_LIMIT", "30"))

# Like/unlike transactions are retried on deadlock or serialization failure
MATCH_TX_MAX_RETRIES = int(os.getenv("MATCH_TX_MAX_RETRIES", "3"))

# Rate limiting (Redis backed, see rate_limiter.py)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
LIKE_RATE_LIMIT = int(os.getenv("LIKE_RATE_LIMIT", "120"))  # per party per hour
AVAILABILITY_RATE_LIMIT = int(os.getenv("AVAILABILITY_RATE_LIMIT", "60"))  # per party per hour

# Frontend origins allowed by CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:8080,http://localhost:5173",
).split(",")
