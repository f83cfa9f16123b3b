"""
User-facing text for Modgate.

- **response_formatter.py**: Renders successes and errors into responses,
  keeping every message within Discord's content limit.
"""
