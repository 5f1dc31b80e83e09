"""
Configuration management for the Underwriting Ledger.
-----------------------------------------------------
- Loads environment variables from `.env` (for local) or runtime environment (AWS/Prod).
- Centralized access for database, clock, ownership, and token settings.
- Scoring and pricing constants are NOT configured here (see engine/constants.py):
  they must stay fixed so every recorded decision can be reproduced.
"""

import os
import json
import secrets
from typing import Optional
from dotenv import load_dotenv

# Load .env only in local/dev mode
if os.getenv("ENV", "local") == "local":
    load_dotenv()


class Config:
    """Central configuration object for all service-level environment variables."""

    # =========================================================
    # 🧩 Helper
    # =========================================================
    @staticmethod
    def _from_env(key: str, default: Optional[str] = None, cast=None):
        """Load environment variable with optional casting."""
        value = os.getenv(key, default)
        if cast and value is not None:
            try:
                return cast(value)
            except ValueError:
                return default
        return value

    # =========================================================
    # 🌐 DATABASE & STORAGE
    # =========================================================
    DB_URL: str = _from_env.__func__("DB_URL", "sqlite:///./ledger.db")
    AWS_REGION: str = _from_env.__func__("AWS_REGION", "us-east-1")

    # =========================================================
    # 🔐 IDENTITY & ADMINISTRATION
    # =========================================================
    OWNER_IDENTITY: str = _from_env.__func__("OWNER_IDENTITY", "ledger-owner")
    JWT_SECRET: str = _from_env.__func__("JWT_SECRET") or secrets.token_hex(32)
    JWT_ALGORITHM: str = _from_env.__func__("JWT_ALGORITHM", "HS256")
    JWT_EXPIRY_MINUTES: int = _from_env.__func__("JWT_EXPIRY_MINUTES", 30, int)

    # =========================================================
    # ⏱️ LEDGER CLOCK
    # =========================================================
    BLOCK_TIME_SECONDS: int = _from_env.__func__("BLOCK_TIME_SECONDS", 600, int)
    GENESIS_TIMESTAMP: int = _from_env.__func__("GENESIS_TIMESTAMP", 0, int)

    # =========================================================
    # 🚀 APP SETTINGS
    # =========================================================
    DEBUG: bool = _from_env.__func__("DEBUG", "False", lambda v: v.lower() == "true")
    LOG_LEVEL: str = _from_env.__func__("LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = _from_env.__func__("LOG_FILE")
    API_HOST: str = _from_env.__func__("API_HOST", "0.0.0.0")
    API_PORT: int = _from_env.__func__("API_PORT", 8000, int)
    ENV: str = _from_env.__func__("ENV", "local")  # local/dev/test/prod

    # =========================================================
    # ✅ Computed Properties
    # =========================================================
    @property
    def is_production(self) -> bool:
        return self.ENV.lower() in ("prod", "production")

    @property
    def is_aws_runtime(self) -> bool:
        """Detect AWS runtime environment."""
        env_vars = ["AWS_EXECUTION_ENV", "ECS_CONTAINER_METADATA_URI", "LAMBDA_TASK_ROOT"]
        return any(os.getenv(v) for v in env_vars)

    # =========================================================
    # 📋 Config Summary
    # =========================================================
    @staticmethod
    def _redact(value: Optional[str]) -> Optional[str]:
        """Redact sensitive info for display."""
        if not value:
            return None
        if len(value) <= 6:
            return "***"
        return f"{value[:3]}***{value[-3:]}"

    def summary(self) -> dict:
        return {
            "ENV": self.ENV,
            "DEBUG": self.DEBUG,
            "DB_URL": self.DB_URL,
            "OWNER_IDENTITY": self.OWNER_IDENTITY,
            "BLOCK_TIME_SECONDS": self.BLOCK_TIME_SECONDS,
            "GENESIS_TIMESTAMP": self.GENESIS_TIMESTAMP,
            "JWT_ALGORITHM": self.JWT_ALGORITHM,
            "JWT_SECRET": self._redact(self.JWT_SECRET),
            "AWS_REGION": self.AWS_REGION,
            "AWS_RUNTIME": self.is_aws_runtime,
        }

    def print_summary(self) -> None:
        """Pretty-print configuration summary (safe for logs)."""
        print("\n🔧 Active Configuration:")
        print(json.dumps(self.summary(), indent=4))


# =========================================================
# Instantiate Global Config
# =========================================================
config = Config()

if __name__ == "__main__":
    config.print_summary()
