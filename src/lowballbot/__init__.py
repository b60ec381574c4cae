"""
Lowball Bot - Discord helper bot for a car lowballing community

Lowball Bot runs a small set of slash commands, buttons, and modals for a
single community server and performs a few moderation actions through the
Discord API.

Core Components:

- **Moderation**: Centralized admin exemption rule, age-limited bulk purge of
  non-admin messages with pacing, and auto-deletion in a locked channel
- **Lowball Submissions**: Modal form whose answers are posted to a
  submissions channel with a role ping
- **Self-assign Role**: Persistent add/remove buttons for the lowball role
- **Health Endpoint**: Small aiohttp server reporting liveness, plus an
  optional self-ping to keep hosted instances awake

Usage:
    from lowballbot.main import main
    main()
"""
