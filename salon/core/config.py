from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    REPLICATE_API_TOKEN: str | None = None
    GENERATION_MODEL: str = "google/nano-banana"
    MOCK_RESULT_URL: str | None = None

    BLOB_STORE_URL: str | None = None
    BLOB_STORE_API_KEY: str | None = None
    PUBLIC_BASE_URL: str = "http://127.0.0.1:8000"

    RESULT_FETCH_TIMEOUT_SECONDS: float = 60.0
    TRANSFORM_WORKERS: int = 4


settings = Settings()
