# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Project configuration
    PROJECT_NAME: str = "AI Photo Editor Backend"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    # API docs toggle (from env ENABLE_API_DOCS, default True)
    ENABLE_API_DOCS: bool = True

    # Environment configuration
    ENVIRONMENT: str = "development"  # development or production

    # Database configuration
    DATABASE_URL: str = "sqlite:///./photo_editor.db"

    # Database auto-migration configuration (only in development)
    DB_AUTO_MIGRATE: bool = True

    # JWT configuration (tokens are issued by the external auth service)
    SECRET_KEY: str = "secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60  # 7 days in minutes

    # Credit ledger configuration
    # Balance assigned the first time a user is seen by the ledger
    CREDITS_INITIAL_BALANCE: int = 0

    # AI provider configuration
    AI_DEFAULT_PROVIDER: str = "replicate"
    REPLICATE_API_TOKEN: str = ""
    REPLICATE_API_BASE_URL: str = "https://api.replicate.com/v1"
    AI_PROVIDER_TIMEOUT: float = 60.0  # seconds

    # Webhook configuration
    # Base URL of the completion webhook as reachable by the provider,
    # e.g. "https://example.com/api/webhooks/ai-photo-completion".
    # When neither is set, task outcome is only discovered through polling.
    REPLICATE_WEBHOOK_URL: Optional[str] = None
    WEBHOOK_BASE_URL: Optional[str] = None
    # Signing secret ("whsec_...") used to verify provider callbacks
    REPLICATE_WEBHOOK_SECRET: str = ""
    WEBHOOK_TIMESTAMP_TOLERANCE_SECONDS: int = 300

    # Generated asset storage configuration
    # Supported backends: "local" (default), "s3"
    STORAGE_BACKEND: str = "local"
    STORAGE_FOLDER: str = "ai-photo-editor"
    STORAGE_LOCAL_DIR: str = "./uploads"
    STORAGE_PUBLIC_BASE_URL: str = "http://localhost:8000/uploads"
    # Serve STORAGE_LOCAL_DIR under /uploads from this app (local backend only)
    STORAGE_SERVE_LOCAL: bool = True
    # S3/MinIO configuration (only used when STORAGE_BACKEND is "s3")
    STORAGE_S3_ENDPOINT: str = ""
    STORAGE_S3_ACCESS_KEY: str = ""
    STORAGE_S3_SECRET_KEY: str = ""
    STORAGE_S3_BUCKET: str = "ai-photo-editor"
    STORAGE_S3_REGION: str = "us-east-1"
    STORAGE_S3_USE_SSL: bool = True
    # Public URL prefix for uploaded objects; defaults to {endpoint}/{bucket}
    STORAGE_S3_PUBLIC_URL: str = ""

    # Asset download configuration
    ASSET_DOWNLOAD_TIMEOUT: float = 60.0  # seconds
    ASSET_MAX_DOWNLOAD_SIZE_MB: int = 50

    # Reconciliation configuration
    # A finalization claim older than this is considered abandoned
    TASK_FINALIZE_CLAIM_TTL_SECONDS: int = 300
    # Query the provider when a non-terminal task is read
    TASK_STATUS_REFRESH_ENABLED: bool = True

    # Session configuration
    SESSION_DEFAULT_TITLE: str = "New Chat"
    SESSION_TITLE_MAX_LENGTH: int = 10
    SESSION_LIST_DEFAULT_LIMIT: int = 50
    SESSION_LIST_MAX_LIMIT: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global configuration instance
settings = Settings()
