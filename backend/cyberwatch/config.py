from pydantic_settings import BaseSettings
from pathlib import Path
import yaml


class Settings(BaseSettings):
    app_name: str = "CyberWatch"
    app_version: str = "1.0.0"
    debug: bool = False

    # Paths
    config_dir: Path = Path("config")
    storage_path: Path = Path("data/storage.json")

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:9002"]

    # Mock data
    mock_threat_count: int = 25
    mock_seed: int | None = None  # fixed seed for reproducible demo data
    threat_page_size: int = 9
    persist_reported_threats: bool = False

    # AI Configuration
    ai_provider: str = "ollama"  # ollama or openai-compatible
    ai_base_url: str = "http://localhost:11434"
    ai_model: str = "llama3.2"
    ai_api_key: str = ""
    ai_timeout: float = 60.0  # seconds, per generation call

    class Config:
        env_file = ".env"
        env_prefix = "CYBERWATCH_"


settings = Settings()


def load_yaml_config(filename: str) -> dict:
    config_path = settings.config_dir / filename
    if config_path.exists():
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    return {}
