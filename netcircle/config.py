from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage settings
    snapshot_dir: Path = Path("data/networks")
    seed_sample_network: bool = True  # new accounts start with the sample network

    # Layout settings
    layout_width: float = 960.0
    layout_height: float = 640.0
    layout_iterations: int = 300
    layout_seed: int | None = None  # fixed seed for reproducible layouts

    # Web server settings
    default_user_id: str = "local"  # used when a request carries no X-User-Id header
    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
