import os
from enum import StrEnum
from pathlib import Path

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

_ENV_FILE = Path.home() / "env" / ".env.dev"
_env_vars = dotenv_values(str(_ENV_FILE)) if _ENV_FILE.exists() else {}


class LLMBackend(StrEnum):
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENAI = "openai"


def _provider_key(name: str) -> str:
    return os.environ.get(name) or _env_vars.get(name) or ""


class Settings(BaseSettings):
    app_name: str = "Buy Better"
    debug: bool = False
    log_level: str = "INFO"

    llm_backend: LLMBackend = LLMBackend.ANTHROPIC
    llm_timeout: float = 60.0
    results_per_country: int = 5

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    anthropic_max_tokens: int = 2048

    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_url: str = "https://api.openai.com/v1"

    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest"
    exchange_rate_timeout: float = 10.0

    default_home_country: str = "Singapore"
    default_visiting_country: str = "Malaysia"

    model_config = {
        "env_prefix": "BUYBETTER_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def model_post_init(self, __context):
        if not self.anthropic_api_key:
            self.anthropic_api_key = _provider_key("ANTHROPIC_API_KEY")
        if not self.gemini_api_key:
            self.gemini_api_key = _provider_key("GEMINI_API_KEY")
        if not self.openai_api_key:
            self.openai_api_key = _provider_key("OPENAI_API_KEY")


settings = Settings()
