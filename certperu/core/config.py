# certperu/core/config.py
import os
from pydantic import BaseModel, Field

from dotenv import load_dotenv

load_dotenv()

def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'certperu.db')}")

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}

class Settings(BaseModel):
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120")))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    TIMEZONE: str = Field(default_factory=lambda: os.getenv("TIMEZONE", "America/Lima"))
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    # Verificación pública
    PUBLIC_BASE_URL: str = Field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "https://certificadosperu.com"))
    VERIFY_CODE_LENGTH: int = Field(default_factory=lambda: int(os.getenv("VERIFY_CODE_LENGTH", "12")))
    VERIFY_CODE_MAX_ATTEMPTS: int = Field(default_factory=lambda: int(os.getenv("VERIFY_CODE_MAX_ATTEMPTS", "10")))
    PREVIEW_PREFIX: str = "PREVIEW-"

    # Seed del superadmin
    ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("ADMIN_EMAIL", "admin@certificadosperu.com"))
    ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "admin12345"))

settings = Settings()
