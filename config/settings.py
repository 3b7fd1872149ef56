"""
Centralized configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., LOG_LEVEL env var → Settings.LOG_LEVEL)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

Every module imports `settings` from here instead of hardcoding values.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Simulation ──────────────────────────────────────────────
    DEFAULT_SCHEDULING_POLICY: str = "rms"
    MAX_SIMULATION_TIME: int = 100_000   # upper bound on end_time (ticks)

    # ── Comparison pool ─────────────────────────────────────────
    SIMULATION_POOL_SIZE: int = 4        # threads used by compare()

    # ── App ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_BASE_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton, import this everywhere
settings = Settings()
