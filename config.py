"""
Configuration file for the keyword engine
"""
import os
from dataclasses import dataclass
from typing import Optional

@dataclass
class EngineConfig:
    """Configuration settings for the keyword engine"""

    # Catalog
    seed_sample_data: bool = True
    default_page_limit: int = 10
    max_page_limit: int = 100

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config with KEYWORD_ENGINE_* environment overrides"""
        defaults = cls()
        return cls(
            seed_sample_data=os.getenv("KEYWORD_ENGINE_SEED_SAMPLES", str(defaults.seed_sample_data)).lower()
            in ("1", "true", "yes"),
            default_page_limit=int(os.getenv("KEYWORD_ENGINE_PAGE_LIMIT", defaults.default_page_limit)),
            api_host=os.getenv("KEYWORD_ENGINE_HOST", defaults.api_host),
            api_port=int(os.getenv("KEYWORD_ENGINE_PORT", defaults.api_port)),
            log_level=os.getenv("KEYWORD_ENGINE_LOG_LEVEL", defaults.log_level).upper(),
            log_dir=os.getenv("KEYWORD_ENGINE_LOG_DIR", defaults.log_dir),
        )

# Default configuration instance
config = EngineConfig.from_env()
