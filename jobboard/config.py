# jobboard/config.py

from __future__ import annotations
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    # — Core —
    DEBUG: bool = False  # True enables uvicorn reload
    LOG_LEVEL: str = "INFO"
    PORT: int = Field(3000, ge=1, le=65535)

    # --- Document store ---
    STORE_BACKEND: Literal["memory", "mongo"] = "memory"
    MONGODB_URL: str = Field("mongodb://localhost:27017")
    MONGODB_DATABASE: str = "jobboard"
    USERS_COLLECTION: str = "users"
    VAGAS_COLLECTION: str = "vagas"

    # --- Credentials ---
    # bcrypt cost factor; passlib refuses anything outside 4..31
    BCRYPT_ROUNDS: int = Field(10, ge=4, le=31)

    # --- HTTP ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
