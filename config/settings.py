from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Sui full node (JSON-RPC). Defaults to public testnet for local dev.
    SUI_RPC_URL: str = "https://fullnode.testnet.sui.io:443"
    SUI_RPC_TIMEOUT_SECONDS: float = 10.0

    # Fan-out limits for state-source reads
    STATE_READ_CONCURRENCY: int = Field(default=16, gt=0)
    PNL_CONCURRENCY: int = Field(default=8, gt=0)

    # Quotes
    DEFAULT_SLIPPAGE: float = Field(default=0.05, ge=0, le=1)

    # Share solver tunables (bounded binary search + linear refinement)
    SOLVER_MAX_ITERATIONS: int = Field(default=50, gt=0)
    SOLVER_TARGET_UTILIZATION: float = Field(default=0.99, gt=0, le=1)
    SOLVER_REFINE_FLOOR: float = Field(default=0.95, ge=0, le=1)
    SOLVER_REFINE_WINDOW: int = Field(default=10_000, gt=0)
    SOLVER_REFINE_STEP: int = Field(default=100, gt=0)
    SOLVER_MIN_PRICE: float = Field(default=0.01, gt=0)
    SOLVER_SEED_MULTIPLIER: int = Field(default=3, gt=0)

    # App
    APP_NAME: str = "Range Market Pricing"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
