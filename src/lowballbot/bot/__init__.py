"""
Discord-facing components for Lowball Bot.

- **cogs/**: Slash commands and event listeners, one cog per concern.
- **lowball_modal.py**: The lowball submission modal and post formatting.
- **role_ui.py**: Persistent view with the add/remove role buttons.
"""
