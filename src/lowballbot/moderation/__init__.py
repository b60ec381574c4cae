"""
Moderation logic for Lowball Bot.

Everything here works on plain values and injected callables so it can run
without a Discord connection:

- **moderation_datatypes.py**: Actor, ModerationMessage, ModerationDecision,
  GuildRole, DeletionSummary and the result enums.
- **errors.py**: Exception taxonomy shared by the moderation layer and cogs.
- **permissions.py**: The admin exemption rule and the per-message
  deletability check built on it.
- **message_filter.py**: Selects purge candidates from fetched messages.
- **deletion_executor.py**: Deletes selected messages in order with age
  limit, pacing, and per-message failure accounting.
- **purge.py**: Ties selection and deletion together for the /purge command.
- **role_toggle.py**: Idempotent grant/revoke of a named role.
"""
