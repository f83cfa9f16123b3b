"""
py-cord integration for Modgate.

- **interaction_adapter.py**: Builds interactions from application contexts and
  sends responses back.
- **bot_runtime.py**: Wires settings, executor, scheduler and handlers together.
- **cogs/**: Slash command declarations.
"""
