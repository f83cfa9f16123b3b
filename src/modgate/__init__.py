"""
Modgate - Discord moderation and support-ticket bot

Modgate answers slash commands for manual moderation and channel-backed
support tickets.

Core Components:

- **Authorization**: Every moderation action passes an ordered gate (guild
  context, caller capability, self/bot target, target resolution) before any
  Discord call is made
- **Platform calls**: Exactly one REST call per accepted action, classified
  into a small error taxonomy and never retried
- **Tickets**: Private text channels named ``ticket-NNNNNN`` whose topic
  records the creator; closing schedules a delayed channel deletion
- **Responses**: Public confirmations for moderation, ephemeral errors, and
  content kept within Discord's 2000-character limit
"""
