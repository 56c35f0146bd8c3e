"""Operation adapters that produce values for the scheduler to poll.

Implementations:
- HTTP JSON fetch (httpx)
"""
