"""
Liveness support for hosted deployments.

- **health_server.py**: aiohttp application serving ``/`` and ``/health``.
- **keep_alive.py**: Periodic self-ping of the public health URL.
"""
