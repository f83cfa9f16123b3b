"""
Support tickets.

- **ticket_lifecycle.py**: Create, close, add and remove operations on ticket
  channels. Ticket state lives only in the channel name and topic.
"""
