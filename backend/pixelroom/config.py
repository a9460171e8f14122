from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "env_prefix": "",
        "case_sensitive": False,
    }

    # AI APIs
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    text_backend: str = "openai"  # "openai" or "anthropic"
    profile_model: str = "gpt-4o"
    questions_model: str = "gpt-4o"
    anthropic_model: str = "claude-sonnet-4-5"
    image_model: str = "gpt-image-1"
    llm_timeout_seconds: float = 60.0
    image_timeout_seconds: float = 120.0

    # Image pipeline
    fetch_timeout_seconds: float = 30.0
    max_reference_images: int = 6
    stylize_concurrency: int = 1

    # App
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str = ""
    port: int = 8787


settings = Settings()
