"""
Typed values passed between the command layer components.

- **interaction_datatypes.py**: Immutable snapshot of one slash-command invocation.
- **action_datatypes.py**: Ban, kick and timeout actions with their bounds.
- **ticket_datatypes.py**: Ticket priorities, requests, channel identity and results.
- **response_datatypes.py**: Outbound response contract and file attachments.
"""
