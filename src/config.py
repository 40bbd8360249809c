from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "pixel-art-service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    cors_origins: list[str] = ["*"]

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-image"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout: float = 120.0
    base_instruction: str = "convert this image to pixel art"

    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: list[str] = ["image/png", "image/jpeg", "image/webp"]


settings = Settings()
