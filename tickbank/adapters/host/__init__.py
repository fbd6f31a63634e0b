"""Host tick driver adapters.

Both drivers consume the suspension tokens yielded by Scheduler.run():
- Manual (host calls tick() from its own frame loop)
- Asyncio (suspensions become asyncio.sleep calls on the event loop)
"""
