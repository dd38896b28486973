"""
Configuration management for OpenFlights.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str, default: bool = False) -> bool:
    """Parse a truthy environment value ('1', 'true', 'yes')."""
    if not value:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class DataConfig:
    """Bulk data file locations."""
    data_dir: str = os.getenv('OPENFLIGHTS_DATA_DIR', 'data')
    airports_file: str = os.getenv('AIRPORTS_FILE', 'airports.dat')
    airlines_file: str = os.getenv('AIRLINES_FILE', 'airlines.dat')
    routes_file: str = os.getenv('ROUTES_FILE', 'routes.dat')
    load_on_startup: bool = _parse_bool(os.getenv('LOAD_ON_STARTUP', ''), default=True)

    @property
    def airports_path(self) -> Path:
        return Path(self.data_dir) / self.airports_file

    @property
    def airlines_path(self) -> Path:
        return Path(self.data_dir) / self.airlines_file

    @property
    def routes_path(self) -> Path:
        return Path(self.data_dir) / self.routes_file


@dataclass(frozen=True)
class ApiConfig:
    """HTTP layer settings."""
    max_report_rows: int = int(os.getenv('MAX_REPORT_ROWS', '500'))
    cors_origins: str = os.getenv('CORS_ORIGINS', '*')


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    data: DataConfig
    api: ApiConfig

    # Flask settings
    secret_key: str
    debug: bool
    host: str
    port: int


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        data=DataConfig(),
        api=ApiConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', '8080')),
    )


# Singleton instance
config = load_config()
