"""External adapters for pollguard.

This package contains all external dependencies (httpx, the asyncio event
loop, logging sinks) and provides implementations of the core port
interfaces.

Adapter Organization:

- timer/: Timer sources that drive scheduler ticks (asyncio)
- operation/: Operations to poll (HTTP JSON fetch)
- handler/: Result handlers consuming poll outcomes (logging)
- listener/: Tick listeners for observability (logging)
- scheduler/: Wiring of the core scheduler to a timer, public start()
"""
