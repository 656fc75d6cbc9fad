"""
Utility modules for the catalog client
"""
from .config_loader import ClientConfig, MockLatencyConfig, StorageConfig, load_client_config

__all__ = [
    'ClientConfig',
    'MockLatencyConfig',
    'StorageConfig',
    'load_client_config',
]
