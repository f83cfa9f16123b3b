"""
Delayed background work.

- **channel_deletion_scheduler.py**: Deletes a closed ticket's channel after a
  fixed delay as a detached asyncio task.
"""
