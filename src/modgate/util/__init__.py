"""
Utility helpers for Modgate.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit, a rotating file handler, and suppression of noisy
  Discord/aiohttp loggers.
"""
