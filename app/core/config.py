from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "dev"
    API_VERSION: str = "v1.0.0"
    DATABASE_URL: str = "sqlite:///./app.db"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    JWT_ISSUER: str = "milo-wellness"
    JWT_AUDIENCE: str = "milo-wellness-web"
    JWT_ACCESS_TTL_SECONDS: int = 3600
    JWT_REFRESH_TTL_DAYS: int = 14
    JWT_SECRET: str = "change_me_super_secret"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT_SECONDS: int = 25

    # Google Cloud Natural Language, used for journal sentiment
    LANGUAGE_API_KEY: str = ""
    LANGUAGE_BASE_URL: str = "https://language.googleapis.com/v1"
    LANGUAGE_TIMEOUT_SECONDS: int = 15
    ANALYZE_JOURNAL_ON_CREATE: bool = False

    # Google / Firebase sign-in
    GOOGLE_CLIENT_ID: str = ""
    FIREBASE_PROJECT_ID: str = ""
    # Contents of a Firebase service account JSON, not a path.
    FIREBASE_SERVICE_ACCOUNT_JSON: str = ""

    CRISIS_HOTLINE: str = "988"
    # Surfaced for users who have not been assessed yet
    DEFAULT_RISK_LEVEL: int = 2
    CHAT_CONTEXT_MESSAGES: int = 20
    WELLNESS_LOOKBACK_ITEMS: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
