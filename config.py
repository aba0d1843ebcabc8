"""
Environment configuration

Variables are read from `.env` (or `.env.production` when ENV=production).
"""
import os
from typing import Optional

from dotenv import load_dotenv

if os.getenv("ENV") == "production":
    load_dotenv(".env.production")
else:
    load_dotenv()


def _atlas_url() -> Optional[str]:
    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASS")
    cluster = os.getenv("CLUSTER")
    if not (user and password and cluster):
        return None
    return f"mongodb+srv://{user}:{password}@{cluster}/?retryWrites=true&w=majority"


DATABASE_URL = os.getenv("DATABASE_URL") or _atlas_url()
DATABASE_NAME = os.getenv("DATABASE_NAME") or os.getenv("DATABASE")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-key-change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", 90))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

PORT = int(os.getenv("PORT", 8000))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

API_URL = os.getenv("API_URL", f"http://localhost:{PORT}")
