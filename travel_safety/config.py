import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "IsItSafe/1.0 (travel safety lookup)"

DATA_SOURCES = ["US State Dept", "UK Foreign Office", "GDELT News", "ACLED Conflict Data"]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    acled_username: str = ''
    acled_password: str = ''
    buttondown_api_key: str = ''
    http_timeout: int = 30
    cache_ttl_hours: int = 6
    cache_snapshot_seconds: int = 300
    prefer_cache_over_live: bool = True
    alert_interval_seconds: int = 3600
    user_agent: str = DEFAULT_USER_AGENT
    host: str = '127.0.0.1'
    port: int = 8000
    mcp_port: int = 8001

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            acled_username=os.environ.get('ACLED_USERNAME', '').strip(),
            acled_password=os.environ.get('ACLED_PASSWORD', '').strip(),
            buttondown_api_key=os.environ.get('BUTTONDOWN_API_KEY', '').strip(),
            http_timeout=_env_int('HTTP_TIMEOUT', 30),
            cache_ttl_hours=_env_int('CACHE_TTL_HOURS', 6),
            cache_snapshot_seconds=_env_int('CACHE_SNAPSHOT_SECONDS', 300),
            prefer_cache_over_live=_env_bool('PREFER_CACHE_OVER_LIVE', True),
            alert_interval_seconds=_env_int('ALERT_INTERVAL_SECONDS', 3600),
            user_agent=os.environ.get('APP_USER_AGENT', DEFAULT_USER_AGENT),
            host=os.environ.get('HOST', '127.0.0.1'),
            port=_env_int('PORT', 8000),
            mcp_port=_env_int('MCP_PORT', 8001),
        )
