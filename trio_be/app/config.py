import os
from functools import lru_cache

from dotenv import load_dotenv, find_dotenv

# Values from a local .env file win over the process environment
_env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(_env_path, override=True)


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    # Uploaded product images live here and are served under /media
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT")
    # Shared admin credential pair; admin endpoints are disabled when unset
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD")
    CART_COOKIE_NAME: str = os.getenv("CART_COOKIE_NAME", "cart_session")
    # Cart cookie lifetime; cart rows untouched for longer are pruned at startup
    CART_SESSION_DAYS: int = int(os.getenv("CART_SESSION_DAYS", "30"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    MAX_PRODUCT_IMAGES: int = int(os.getenv("MAX_PRODUCT_IMAGES", "5"))
    PORT: int = int(os.getenv("PORT", "8000"))


@lru_cache
def get_settings():
    return Settings()
