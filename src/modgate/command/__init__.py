"""
Command handlers, independent of the Discord transport.

- **option_parsing.py**: Validates raw options into typed requests.
- **moderation_cmds.py**: ``/ban``, ``/kick`` and ``/timeout``.
- **ticket_cmds.py**: ``/ticket create|close|add|remove``.
- **permissions_cmd.py**: ``/permissions``.
"""
