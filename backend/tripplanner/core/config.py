from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", populate_by_name=True
    )

    app_name: str = Field("AI Travel Planner", alias="APP_NAME")
    environment: str = Field("local", alias="ENVIRONMENT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    llm_provider: str = Field("mock", alias="LLM_PROVIDER")
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    completion_temperature: float = Field(0.75, alias="COMPLETION_TEMPERATURE")
    completion_timeout: Optional[float] = Field(None, alias="COMPLETION_TIMEOUT")
    ollama_host: str = Field("http://localhost:11434", alias="OLLAMA_HOST")
    ollama_model: str = Field("llama3", alias="OLLAMA_MODEL")
    document_store: str = Field("memory", alias="DOCUMENT_STORE")
    store_path: str = Field("data/trips.json", alias="STORE_PATH")
    identity_provider: str = Field("local", alias="IDENTITY_PROVIDER")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
