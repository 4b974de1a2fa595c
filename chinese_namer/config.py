from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Central configuration pulled from environment variables or .env file."""
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    siliconflow_api_key: Optional[str] = Field(None, description="API key for the completion endpoint.")
    siliconflow_api_url: str = Field(
        "https://api.siliconflow.cn/v1",
        description="OpenAI-compatible base URL; /chat/completions is appended by the client.",
    )
    llm_model: str = Field("deepseek-ai/DeepSeek-R1", alias="DEEPSEEK_MODEL")
    max_tokens: int = Field(2000, gt=0)
    temperature: float = Field(0.3, ge=0.0, le=2.0)
    top_p: float = Field(0.8, gt=0.0, le=1.0)
    llm_timeout_seconds: float = Field(60.0, gt=0, description="Server-to-model call budget.")

    rate_limit_window_ms: int = Field(15 * 60 * 1000, gt=0)
    rate_limit_max_requests: int = Field(10, gt=0)
    # Empty string disables Redis and keeps rate-limit counters in memory.
    redis_url: Optional[str] = Field("redis://localhost:6379/0")

    port: int = Field(3000, ge=1, le=65535)
    environment: str = Field("development", alias="NODE_ENV")
    app_version: str = Field("1.0.0")
    cors_origins: str = Field("https://your-domain.com", description="Comma-separated production origins.")
    log_file: str = Field("logs/chinese_namer.log")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        if self.is_production:
            return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return [f"http://localhost:{self.port}", f"http://127.0.0.1:{self.port}"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
