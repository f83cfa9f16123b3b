"""
Moderation pipeline for Modgate.

- **authorization_gate.py**: Ordered, side-effect free checks run before any
  moderation call.
- **platform_executor.py**: Discord REST requests over aiohttp, with status
  classification into the platform error taxonomy. No retries.
"""
