"""
Configuration management for Lowball Bot.

- **app_configuration.py**: YAML loader for tunables (pacing, age limit,
  keep-alive interval) and the immutable BotSettings snapshot assembled once
  at startup from the YAML file and the process environment.
"""
