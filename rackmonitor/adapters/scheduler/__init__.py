"""Scheduler adapters for driving monitoring sweeps.

Implementations support:
- Daemon (asyncio event loop with configurable interval)
- Single sweep (one-shot, for cron-style invocation)
"""
