"""Timer adapters that drive scheduler ticks.

Implementations:
- Asyncio (event loop call_at / time)
"""
