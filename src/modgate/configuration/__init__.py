"""
Configuration management for Modgate.

- **app_configuration.py**: YAML configuration loader (read under a shared file
  lock) for Discord API and ticket settings, combined with the bot credential
  from the environment or a ``.env`` file into an immutable ``BotSettings``.
"""
