from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    env: str = "development"
    database_url: str
    site_url: str = "https://motormaniacolombia.com"

    # Shared secret for the settlement trigger (cron / admin panel)
    internal_api_key: str | None = None

    # Transactional email (Resend)
    resend_api_key: str | None = None
    resend_base_url: str = "https://api.resend.com"
    email_from: str = "MotorManía <noreply@motormaniacolombia.com>"
    email_timeout: float = 10.0

    # Wallet rules, amounts in COP
    min_wager_cop: int = 10_000
    min_withdraw_cop: int = 10_000

    fastf1_cache_dir: str | None = None
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = ""
        case_sensitive = False

    @property
    def dashboard_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/dashboard"

settings = Settings()
