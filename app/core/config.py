from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SUPABASE_URL: str
    SUPABASE_SERVICE_KEY: str

    RESEND_API_KEY: str | None = None
    RESEND_FROM_EMAIL: str = "TBI Platform <onboarding@resend.dev>"

    APP_URL: str = "http://localhost:9002"
    EMAIL_TOKEN_TTL_DAYS: int = 7
    CLEANUP_API_KEY: str | None = None

    VAPID_PUBLIC_KEY: str | None = None
    VAPID_PRIVATE_KEY: str | None = None
    VAPID_SUBJECT: str = "mailto:admin@example.com"

    LOG_LEVEL: str = "INFO"

    @property
    def MENTOR_REQUESTS_URL(self) -> str:
        return f"{self.APP_URL.rstrip('/')}/mentor/requests"

    @property
    def LOGIN_URL(self) -> str:
        return f"{self.APP_URL.rstrip('/')}/login"

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
