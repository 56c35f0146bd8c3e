"""Scheduler adapters that wire the core scheduler to concrete timers.

Implementations support:
- Poller (asyncio timer, one task per scheduler)
"""
