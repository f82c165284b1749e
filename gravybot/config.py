"""Configuration module centralizing environment access.

Settings are built once at startup (environment plus command-line flags) and
handed to the session and each adapter explicitly. Nothing in the core reads
``os.environ`` directly.
"""
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from gravybot.domain.errors import ConfigurationError

VERSION = "1.0"

DEFAULT_SERVER_ADDRESS = "dino.surly.org:6250"
DEFAULT_YIRP_API_ADDRESS = "https://api.yirp.org/v1/shorten"


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _port(raw: Optional[str], name: str) -> Optional[int]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        port = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer port, got {raw!r}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"{name} out of range: {port}")
    return port


def split_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts."""
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ConfigurationError(f"Server address must be host:port, got {address!r}")
    parsed = _port(port, "server port")
    if parsed is None:
        raise ConfigurationError(f"Server address must be host:port, got {address!r}")
    return host, parsed


@dataclass(frozen=True)
class Settings:
    # Session
    server_address: str = DEFAULT_SERVER_ADDRESS
    username: str = ""
    password: str = ""
    trigger_word: str = "Gravybot"
    read_timeout: float = 1.0

    # Upstream APIs
    yirp_api_address: str = DEFAULT_YIRP_API_ADDRESS
    yirp_api_key: str = ""
    weather_api_key: str = ""
    finnhub_api_key: str = ""
    http_timeout: float = 10.0

    # Process
    health_port: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        split_address(self.server_address)

    @property
    def host(self) -> str:
        return split_address(self.server_address)[0]

    @property
    def port(self) -> int:
        return split_address(self.server_address)[1]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from environment variables.

        Keyword overrides (typically parsed command-line flags) win over the
        environment; ``None`` overrides are ignored.
        """
        env = os.environ if environ is None else environ
        settings = cls(
            server_address=env.get("BOT_SERVER") or DEFAULT_SERVER_ADDRESS,
            username=env.get("BOT_USERNAME", ""),
            password=env.get("BOT_PASSWORD", ""),
            trigger_word=env.get("BOT_TRIGGER") or "Gravybot",
            read_timeout=_float(env, "READ_TIMEOUT", 1.0),
            yirp_api_address=env.get("YIRP_API_ADDRESS") or DEFAULT_YIRP_API_ADDRESS,
            yirp_api_key=env.get("YIRP_APIKEY", ""),
            weather_api_key=env.get("WEATHER_APIKEY", ""),
            finnhub_api_key=env.get("FINNHUB_APIKEY", ""),
            http_timeout=_float(env, "HTTP_TIMEOUT", 10.0),
            health_port=_port(env.get("HEALTH_PORT"), "HEALTH_PORT"),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if "health_port" in overrides:
            overrides["health_port"] = _port(overrides["health_port"], "health port")
        if "log_level" in overrides:
            overrides["log_level"] = overrides["log_level"].upper()
        return replace(settings, **overrides) if overrides else settings

    def masked(self) -> dict:
        """Settings as a dict with secrets hidden, for logging."""
        def mask(value: str) -> str:
            return "***" + value[-4:] if len(value) > 4 else ("***" if value else "NOT_SET")

        return {
            "server_address": self.server_address,
            "username": self.username or "NOT_SET",
            "password": "<password>" if self.password else "NOT_SET",
            "yirp_api_address": self.yirp_api_address,
            "yirp_api_key": mask(self.yirp_api_key),
            "weather_api_key": mask(self.weather_api_key),
            "finnhub_api_key": mask(self.finnhub_api_key),
            "http_timeout": self.http_timeout,
            "health_port": self.health_port,
        }

