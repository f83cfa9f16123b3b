from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import fcntl
import os
from typing import Any, Dict, Mapping
import yaml
from dotenv import load_dotenv

from modgate.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15.0
DEFAULT_USER_AGENT = "DiscordBot (https://github.com/modgate/modgate, 0.1.0)"
DEFAULT_TICKET_DELETION_DELAY_SECONDS = 10.0

TOKEN_ENV_VAR = "DISCORD_BOT_TOKEN"
APPLICATION_ID_ENV_VAR = "DISCORD_APPLICATION_ID"


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Immutable settings injected into every component at construction.

    Attributes:
        bot_token: Discord bot credential; ``None`` when not configured.
        application_id: The bot's own application/user id, used to refuse
            actions that target the bot.
        api_base_url: Discord REST base URL including the API version.
        request_timeout_seconds: Total timeout for a single REST call.
        user_agent: User-Agent header sent with every REST call.
        ticket_deletion_delay_seconds: Delay between closing a ticket and
            deleting its channel.
    """
    bot_token: str | None = None
    application_id: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    ticket_deletion_delay_seconds: float = DEFAULT_TICKET_DELETION_DELAY_SECONDS

    @property
    def has_credential(self) -> bool:
        return bool(self.bot_token)


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml`` and builds the
    :class:`BotSettings` value handed to the command layer. Secrets never live
    in the YAML file; they come from the environment (optionally a ``.env``
    file) through :meth:`build_settings`.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                # Shared lock for reading
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def section(self, name: str) -> Dict[str, Any]:
        value = self._data.get(name, {})
        return value if isinstance(value, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns an empty dict when the file is missing or malformed.
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        The returned dict is the internal cache. Callers should not mutate it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def api_base_url(self) -> str:
        value = self.section("discord_api").get("base_url") or DEFAULT_API_BASE_URL
        return str(value).rstrip("/")

    @property
    def request_timeout_seconds(self) -> float:
        return float(self.section("discord_api").get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS))

    @property
    def user_agent(self) -> str:
        return str(self.section("discord_api").get("user_agent") or DEFAULT_USER_AGENT)

    @property
    def ticket_deletion_delay_seconds(self) -> float:
        """Seconds between a ticket close notice and the channel deletion.

        Default is 10 seconds.
        """
        return float(self.section("tickets").get("deletion_delay_seconds", DEFAULT_TICKET_DELETION_DELAY_SECONDS))

    def build_settings(self, environ: Mapping[str, str] | None = None) -> BotSettings:
        """Combine the YAML settings with credentials from the environment.

        Parameters
        ----------
        environ:
            Mapping to read credentials from. Defaults to ``os.environ``.

        Returns
        -------
        BotSettings
            Settings value to inject into the executor, gate and controllers.
            A missing token is allowed here; it is reported when a command
            first needs to reach Discord.
        """
        env = os.environ if environ is None else environ
        token = (env.get(TOKEN_ENV_VAR) or "").strip() or None
        application_id = (env.get(APPLICATION_ID_ENV_VAR) or "").strip() or None

        if token is None:
            logger.warning("[APP CONFIGURATION] '%s' is not set; Discord calls will be refused.", TOKEN_ENV_VAR)

        return BotSettings(
            bot_token=token,
            application_id=application_id,
            api_base_url=self.api_base_url,
            request_timeout_seconds=self.request_timeout_seconds,
            user_agent=self.user_agent,
            ticket_deletion_delay_seconds=self.ticket_deletion_delay_seconds,
        )


def load_environment(env_path: Path) -> None:
    """Load ``KEY=value`` pairs from a ``.env`` file into the process environment.

    Existing variables win over the file, matching python-dotenv defaults.
    """
    if load_dotenv(dotenv_path=env_path):
        logger.debug("[APP CONFIGURATION] Loaded environment from %s", env_path)
