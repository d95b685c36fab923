import os
from dotenv import load_dotenv

# Load environment variables from the project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    pg_host = os.getenv("PGHOST")
    pg_port = os.getenv("PGPORT", "5432")
    pg_db = os.getenv("PGDATABASE")
    pg_user = os.getenv("PGUSER")
    pg_password = os.getenv("PGPASSWORD")

    if all([pg_host, pg_db, pg_user, pg_password]):
        DATABASE_URL = (
            f"postgresql+asyncpg://{pg_user}:{pg_password}@{pg_host}:{pg_port}/{pg_db}"
        )

if DATABASE_URL is None:
    raise ValueError(
        "DATABASE_URL is not configured. Set DATABASE_URL explicitly or provide "
        "PGHOST/PGPORT/PGDATABASE/PGUSER/PGPASSWORD environment variables."
    )


def _bool_env(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value not in {"0", "false", "no"}


def _csv_env(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "prod").lower()
IS_DEV_MODE = APP_ENV in {"dev", "development"}
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DATABASE_ECHO = _bool_env("DATABASE_ECHO", "false")

CORS_ORIGINS = _csv_env(
    "CORS_ORIGINS",
    "http://localhost:5500,http://127.0.0.1:5500,http://localhost:4000",
)

# Session tokens
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    if not IS_DEV_MODE:
        raise ValueError("JWT_SECRET_KEY is not configured.")
    JWT_SECRET_KEY = "dev-insecure-secret"
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 7)))

PASSWORD_MIN_LENGTH = 6

# Image store
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_API_BASE_URL = os.getenv("CLOUDINARY_API_BASE_URL", "https://api.cloudinary.com/v1_1")
IMAGE_STORE_MODE = os.getenv("IMAGE_STORE_MODE", "cloudinary").lower()
IMAGE_UPLOAD_FOLDER = os.getenv("IMAGE_UPLOAD_FOLDER", "product-gallery")
IMAGE_UPLOAD_TIMEOUT = float(os.getenv("IMAGE_UPLOAD_TIMEOUT", "30"))
MAX_IMAGE_SIZE_BYTES = int(os.getenv("MAX_IMAGE_SIZE_BYTES", str(5 * 1024 * 1024)))

# Catalog pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
