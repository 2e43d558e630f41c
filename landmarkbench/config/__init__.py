"""Configuration"""
from .settings import Config, DevelopmentConfig, ProductionConfig, get_config, read_engine_config

__all__ = [
    'Config',
    'DevelopmentConfig',
    'ProductionConfig',
    'get_config',
    'read_engine_config',
]
