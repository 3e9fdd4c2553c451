"""Agent configuration via dataclass (no pydantic -- instant construction)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from mt_sdk.protocol.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MARKETPLACE_URL = "https://marketplace.metaltorque.dev/marketplace"
DEFAULT_PORT = 3000
DEFAULT_AGENT_ID = "mt-sdk-agent"

_TRUE_VALUES = ("1", "true", "yes")


@dataclass
class AgentConfig:
    """Configuration for an MT marketplace agent.

    ``None`` means "not given": the value is then taken from the
    environment (``MT_*``), then from the ``[agent]`` table of an optional
    ``config.toml`` (path in ``MT_CONFIG_PATH``), then the default.

    Priority (highest wins): constructor arg > env var > config.toml > default.

    The webhook secret and API key are excluded from ``repr()``.
    """

    api_key: str | None = field(default=None, repr=False)
    webhook_secret: str | None = field(default=None, repr=False)
    port: int | None = None
    marketplace_url: str | None = None
    host: str | None = None
    agent_id: str | None = None
    require_signature: bool | None = None
    log_level: str | None = None
    config_path: Path | str | None = None

    def __post_init__(self) -> None:
        if self.config_path is None:
            env_path = os.getenv("MT_CONFIG_PATH")
            self.config_path = Path(env_path) if env_path else None
        else:
            self.config_path = Path(self.config_path)

        file_values: dict = {}
        if self.config_path is not None and self.config_path.exists():
            file_values = self._load_config_file(self.config_path)

        def pick(current, env_name: str, key: str, default):
            if current is not None:
                return current
            env_value = os.getenv(env_name)
            if env_value is not None and env_value != "":
                return env_value
            if key in file_values:
                return file_values[key]
            return default

        self.api_key = pick(self.api_key, "MT_API_KEY", "api_key", "")
        self.webhook_secret = pick(
            self.webhook_secret, "MT_WEBHOOK_SECRET", "webhook_secret", ""
        )
        self.marketplace_url = pick(
            self.marketplace_url,
            "MT_MARKETPLACE_URL",
            "marketplace_url",
            DEFAULT_MARKETPLACE_URL,
        )
        self.host = pick(self.host, "MT_HOST", "host", "0.0.0.0")
        self.agent_id = pick(self.agent_id, "MT_AGENT_ID", "agent_id", DEFAULT_AGENT_ID)
        self.log_level = str(
            pick(self.log_level, "MT_LOG_LEVEL", "log_level", "INFO")
        ).upper()

        require = pick(
            self.require_signature, "MT_REQUIRE_SIGNATURE", "require_signature", False
        )
        if isinstance(require, str):
            require = require.lower() in _TRUE_VALUES
        self.require_signature = bool(require)

        port = pick(self.port, "MT_PORT", "port", DEFAULT_PORT)
        try:
            port = int(port)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid port {port!r}") from exc
        if not 0 < port < 65536:
            raise ConfigurationError(f"Invalid port {port}. Must be 1-65535")
        self.port = port

        if not self.webhook_secret:
            logger.warning(
                "No webhook secret configured; signatures are checked against an "
                "empty key and unsigned queries are accepted unless "
                "require_signature is set"
            )

    def _load_config_file(self, path: Path) -> dict:
        """Load the ``[agent]`` table of a TOML config file."""
        try:
            import tomllib
        except ModuleNotFoundError:
            import tomli as tomllib  # type: ignore[no-redef]  # Python 3.10 fallback

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            logger.warning("Failed to load config file %s", path, exc_info=True)
            return {}

        return data.get("agent", {})
