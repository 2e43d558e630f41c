"""
Application configuration settings
"""
import os
from typing import List

from dotenv import load_dotenv

from landmarkbench.domain.exceptions import ConfigurationError
from landmarkbench.utils.paths import resolve_path

load_dotenv()


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """Base configuration"""
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Test data locations, resolved upward from the working directory
    GROUND_TRUTH_PATH = os.getenv(
        "GROUND_TRUTH_PATH", "research/mugshot_frontal_original_all/via_region_data_dpd.csv"
    )
    CACHE_DIR = os.getenv("CACHE_DIR", "tests/data/landmarks")
    BENCHMARK_DIR = os.getenv("BENCHMARK_DIR", "tests/data")
    ENGINE_CONFIG_PATH = os.getenv("ENGINE_CONFIG_PATH", "share/config.bundle.json")

    # Corpus run
    IGNORED_IMAGES = _split_list(os.getenv("IGNORED_IMAGES", ""))
    ANNOTATION_OUTPUT_DIR = os.getenv("ANNOTATION_OUTPUT_DIR", "")

    # InsightFace model settings
    MODEL_NAME = os.getenv("INSIGHTFACE_MODEL", "buffalo_l")  # buffalo_l, buffalo_s, buffalo_sc
    DET_SIZE = int(os.getenv("DET_SIZE", 640))

    # GPU settings
    USE_GPU = os.getenv("USE_GPU", "false").lower() == "true"
    GPU_ID = int(os.getenv("GPU_ID", 0))

    @property
    def ANNOTATE_RESULTS(self) -> bool:
        """Draw overlays during corpus runs, follows DEBUG unless set explicitly"""
        value = os.getenv("ANNOTATE_RESULTS")
        if value is None:
            return self.DEBUG
        return value.lower() == "true"


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


def get_config():
    """Get configuration based on environment"""
    env = os.getenv("LANDMARKBENCH_ENV", "development")
    if env == "production":
        return ProductionConfig()
    return DevelopmentConfig()


def read_engine_config(config_file: str = "") -> str:
    """Read the engine's JSON configuration as opaque text.

    Falls back to ``ENGINE_CONFIG_PATH`` searched upward from the working
    directory when no file is given.
    """
    config_path = config_file or resolve_path(get_config().ENGINE_CONFIG_PATH)
    if not config_path or not os.path.isfile(config_path):
        raise ConfigurationError(f"Engine configuration not found: {config_file or get_config().ENGINE_CONFIG_PATH}")

    with open(config_path, "r", encoding="utf-8") as f:
        return f.read()
