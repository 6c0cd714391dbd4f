"""
Daemon side of AgentWallet.

- engine:    in-memory transaction and session state
- server:    FastAPI control surface served by uvicorn
- buildinfo: version and build metadata
"""
