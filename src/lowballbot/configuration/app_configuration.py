from __future__ import annotations

import fcntl
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from lowballbot.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_ROLE_NAME = "lowball"
DEFAULT_HEALTH_PORT = 3000


def _parse_optional_id(raw: Any, name: str) -> Optional[int]:
    """Convert a snowflake from env/YAML into an int; blank means unset."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"{name} must be a numeric Discord ID, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Immutable runtime settings, assembled once at startup.

    Attributes:
        token (str): Discord bot token.
        lowball_channel_id (int | None): Channel receiving lowball submissions.
        auto_delete_channel_id (int | None): Channel where non-admin messages are removed.
        lowball_role_name (str): Self-assignable role name.
        ping_role_id (int | None): Role mentioned at the top of each submission.
        purge_pacing_seconds (float): Pause after each purge deletion.
        max_message_age (timedelta): Age at which messages can no longer be deleted.
        default_purge_amount (int): Messages inspected when /purge gets no amount.
        health_port (int): Port of the health endpoint.
        environment (str): Deployment environment name.
        service_url (str | None): Public base URL used by the keep-alive ping.
        keep_alive_interval (timedelta): Interval between keep-alive pings.
    """

    token: str
    lowball_channel_id: Optional[int] = None
    auto_delete_channel_id: Optional[int] = None
    lowball_role_name: str = DEFAULT_ROLE_NAME
    ping_role_id: Optional[int] = None
    purge_pacing_seconds: float = 0.1
    max_message_age: timedelta = timedelta(days=14)
    default_purge_amount: int = 50
    health_port: int = DEFAULT_HEALTH_PORT
    environment: str = "development"
    service_url: Optional[str] = None
    keep_alive_interval: timedelta = timedelta(minutes=14)

    @property
    def keep_alive_enabled(self) -> bool:
        return self.environment == "production" and bool(self.service_url)


class AppConfig:
    """File-lock based accessor around the YAML tunables file.

    The file holds values that rarely change between deployments (pacing,
    deletion age limit, keep-alive interval, defaults). Deployment-specific
    values (token, channel IDs) come from the environment and take
    precedence in :meth:`build_settings`.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file and return the loaded mapping (empty on error)."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def section(self, key: str) -> Dict[str, Any]:
        """Return a nested mapping, or an empty dict when absent or malformed."""
        value = self._data.get(key, {})
        return value if isinstance(value, dict) else {}

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def purge_pacing_seconds(self) -> float:
        return float(self.section("purge").get("pacing_seconds", 0.1))

    @property
    def max_message_age(self) -> timedelta:
        return timedelta(days=float(self.section("purge").get("max_message_age_days", 14)))

    @property
    def default_purge_amount(self) -> int:
        return int(self.section("purge").get("default_amount", 50))

    @property
    def keep_alive_interval(self) -> timedelta:
        return timedelta(minutes=float(self.section("keep_alive").get("interval_minutes", 14)))

    def build_settings(self, environ: Mapping[str, str] | None = None) -> BotSettings:
        """Assemble :class:`BotSettings` from the environment and this file.

        Parameters
        ----------
        environ:
            Environment mapping; defaults to ``os.environ``.

        Raises
        ------
        ValueError
            If the token is missing or an ID/port is not numeric.
        """
        env = os.environ if environ is None else environ
        lowball = self.section("lowball")

        token = env.get("DISCORD_BOT_TOKEN") or env.get("DISCORD_TOKEN") or ""
        if not token:
            raise ValueError("DISCORD_BOT_TOKEN environment variable is not set")

        port_raw = env.get("PORT") or self.section("health").get("port", DEFAULT_HEALTH_PORT)
        try:
            health_port = int(port_raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"PORT must be an integer, got {port_raw!r}") from exc

        return BotSettings(
            token=token,
            lowball_channel_id=_parse_optional_id(env.get("LOWBALL_CHANNEL_ID"), "LOWBALL_CHANNEL_ID"),
            auto_delete_channel_id=_parse_optional_id(env.get("AUTO_DELETE_CHANNEL_ID"), "AUTO_DELETE_CHANNEL_ID"),
            lowball_role_name=env.get("LOWBALL_ROLE_NAME") or lowball.get("role_name") or DEFAULT_ROLE_NAME,
            ping_role_id=_parse_optional_id(
                env.get("LOWBALL_PING_ROLE_ID") or lowball.get("ping_role_id"), "LOWBALL_PING_ROLE_ID"
            ),
            purge_pacing_seconds=self.purge_pacing_seconds,
            max_message_age=self.max_message_age,
            default_purge_amount=self.default_purge_amount,
            health_port=health_port,
            environment=(env.get("ENVIRONMENT") or "development").lower(),
            service_url=(env.get("RENDER_SERVICE_URL") or "").rstrip("/") or None,
            keep_alive_interval=self.keep_alive_interval,
        )


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
