from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RPSS_", env_file=".env", extra="ignore")

    # --- Ranking engine ---
    # Round ceiling; hitting it means an engine defect, not a normal result
    MAX_ITERATIONS: int = 1000

    # --- Results source ---
    ALLOWED_DOMAIN: str = "scoring.dance"
    HTTP_TIMEOUT_S: float = 30.0

    # --- Runtime ---
    LOG_LEVEL: str = "WARNING"


settings = Settings()
