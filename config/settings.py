"""
Application settings loaded from environment variables.
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

FALLBACK_IDENTIFIER_SALT = "fallback_salt_value_if_not_set_in_env"


class Settings(BaseSettings):
    # ── Identifier hashing ───────────────────────────────────────────────
    # Changing this after users exist makes every stored identifier hash unreachable.
    identifier_salt: str = Field(
        default=FALLBACK_IDENTIFIER_SALT,
        validation_alias=AliasChoices("identifier_salt", "email_salt"),
    )

    # ── Secret hashing (Argon2id) ────────────────────────────────────────
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536     # KiB
    argon2_parallelism: int = 4

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./users.db"

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]
    enable_hash_debug: bool = True      # exposes POST /debug/test-hash

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("identifier_salt")
    @classmethod
    def _blank_salt_is_unset(cls, value: str) -> str:
        return value if value.strip() else FALLBACK_IDENTIFIER_SALT

    @property
    def uses_fallback_salt(self) -> bool:
        return self.identifier_salt == FALLBACK_IDENTIFIER_SALT


config = Settings()
