"""
Utility functions and helpers for Lowball Bot.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit and a per-session rotating log file. Clamps verbose
  library loggers (Discord internals, aiohttp, websockets).

- **discord_utils.py**: Thin adapters between py-cord objects and the plain
  moderation values (Actor, ModerationMessage, GuildRole), message deletion
  with error classification, permission checks, and a role gateway over a
  guild.
"""
