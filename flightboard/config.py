"""
Configuration management for FlightBoard.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse 'true'/'1'/'yes' style flags, or return default if unset."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class UpstreamConfig:
    """Upstream arrival/departure service configuration."""
    base_url: str = os.getenv(
        'UPSTREAM_BASE_URL',
        'https://www.skyscanner.net/g/arrival-departure-svc/api/airports',
    )
    airport_code: str = os.getenv('AIRPORT_CODE', 'kya')
    locale: str = os.getenv('UPSTREAM_LOCALE', 'tr-TR')
    timeout_seconds: float = float(os.getenv('REQUEST_TIMEOUT_SECONDS', '30'))

    # Static request headers - opaque to the rest of the system
    user_agent: str = os.getenv(
        'UPSTREAM_USER_AGENT',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0',
    )
    referer: str = os.getenv(
        'UPSTREAM_REFERER',
        'https://www.skyscanner.net/flights/arrivals-departures/kya/konya-arrivals-departures',
    )
    cookie: Optional[str] = os.getenv('UPSTREAM_COOKIE') or None

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            'User-Agent': self.user_agent,
            'Accept': '*/*',
            'Accept-Language': 'en-GB,en;q=0.5',
            'Accept-Encoding': 'gzip, deflate',
            'Referer': self.referer,
        }
        if self.cookie:
            headers['Cookie'] = self.cookie
        return headers


@dataclass(frozen=True)
class AirportConfig:
    """The single airport this deployment displays."""
    timezone: str = os.getenv('AIRPORT_TIMEZONE', 'Europe/Istanbul')

    @property
    def tzinfo(self) -> ZoneInfo:
        # Naive upstream timestamps are airport-local
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class CacheConfig:
    """Board snapshot cache settings."""
    ttl_seconds: int = int(os.getenv('CACHE_TTL_SECONDS', '600'))
    sweep_enabled: bool = _parse_bool(os.getenv('CACHE_SWEEP_ENABLED'), default=True)


@dataclass(frozen=True)
class PollingConfig:
    """Display refresh poll settings."""
    interval_seconds: int = int(os.getenv('POLL_INTERVAL_SECONDS', '300'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    upstream: UpstreamConfig
    airport: AirportConfig
    cache: CacheConfig
    polling: PollingConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        upstream=UpstreamConfig(),
        airport=AirportConfig(),
        cache=CacheConfig(),
        polling=PollingConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
