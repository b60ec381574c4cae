"""
Lowball Bot
===========

Discord bot for a car lowballing community: a submission form, a
self-assignable ping role, and a few moderation commands, plus an HTTP
health endpoint for hosted deployments.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the project directory holding ``.env``, ``config/`` and ``logs/``.

    Resolution order:
    1. LOWBALLBOT_HOME environment variable, if set.
    2. The executable's directory when running frozen.
    3. Otherwise the grandparent of this package's directory.
    """
    if env_home := os.getenv("LOWBALLBOT_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from lowballbot.configuration.app_configuration import BotSettings, app_config
from lowballbot.health.health_server import HealthServer
from lowballbot.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> BotSettings:
    """Load ``.env`` and build the runtime settings.

    Returns
    -------
    BotSettings
        Settings read once for the lifetime of the process.

    Raises
    ------
    SystemExit
        If the token is missing or a configured value is malformed.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    try:
        return app_config.build_settings(os.environ)
    except ValueError as exc:
        logger.critical("Invalid configuration: %s. Bot cannot start.", exc)
        sys.exit(1)


def build_intents() -> discord.Intents:
    """Intents for slash commands, the auto-delete listener, and member lookups."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.messages = True
    intents.message_content = True
    intents.members = True
    return intents


def load_cogs(bot: discord.Bot, settings: BotSettings) -> None:
    """Register all cogs with the bot."""
    from lowballbot.bot.cogs import events_listener, general_cmds, lowball_cmds, message_listener, moderation_cmds

    events_listener.setup(bot, settings)
    message_listener.setup(bot, settings)
    general_cmds.setup(bot)
    moderation_cmds.setup(bot, settings)
    lowball_cmds.setup(bot, settings)

    logger.info("All cogs loaded successfully.")


def create_bot(settings: BotSettings) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, settings)
    return bot


async def shutdown_runtime(bot: discord.Bot, health_server: HealthServer) -> None:
    """Stop background tasks, the gateway session, and the health server."""
    events_cog = bot.get_cog("EventsListenerCog")
    if events_cog is not None:
        try:
            await events_cog.shutdown()
        except Exception as exc:
            logger.exception("Error stopping keep-alive: %s", exc)

    if not bot.is_closed():
        await bot.close()

    try:
        await health_server.stop()
    except Exception as exc:
        logger.exception("Error stopping health server: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Start the health server and the bot, returning an exit code."""
    settings = load_environment()

    try:
        bot = create_bot(settings)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    health_server = HealthServer(settings.health_port, bot.is_ready)
    exit_code = 0
    try:
        await health_server.start()
        logger.info("Attempting to connect to Discord…")
        await bot.start(settings.token)
    except asyncio.CancelledError:
        logger.info("Bot start cancelled; shutting down")
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, health_server)

    return exit_code


def main() -> int:
    """Console entry point; returns the process exit code."""
    logger.info("Starting Lowball Bot…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
