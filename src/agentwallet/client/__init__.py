"""
Client side of the AgentWallet daemon.

- api:       httpx client for the control surface
- autostart: probe, spawn-if-absent, poll-until-ready
"""
