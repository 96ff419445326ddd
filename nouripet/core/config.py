import os
from pydantic_settings import BaseSettings


def get_default_database_url() -> str:
    """Get default database URL based on environment."""
    # Check for Supabase/Postgres URL first
    if os.environ.get("DATABASE_URL"):
        return os.environ.get("DATABASE_URL")
    # Serverless hosts only allow writes under /tmp
    if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        return "sqlite:////tmp/nouripet.db"
    return "sqlite:///./nouripet.db"


class Settings(BaseSettings):
    APP_NAME: str = "NouriPet Plan API"
    DATABASE_URL: str = get_default_database_url()
    LOG_LEVEL: str = "INFO"

    # Stripe keys are only inspected to pick the price table (test vs live)
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PUBLISHABLE_KEY: str = ""

    # "weekly" or "biweekly"
    DEFAULT_CADENCE: str = "weekly"

    @property
    def stripe_mode(self) -> str:
        """Return "live" only when a live key is configured, otherwise "test"."""
        key = self.STRIPE_SECRET_KEY or self.STRIPE_PUBLISHABLE_KEY
        if key.startswith(("sk_live_", "pk_live_")):
            return "live"
        return "test"

    class Config:
        env_file = ".env"


settings = Settings()
