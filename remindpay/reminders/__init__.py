"""Reminder scheduling module (occurrence calculator, store, advancer, sweep).

The sweep runs either in-process next to the API (asyncio task owned by the
FastAPI lifespan) or as a Celery beat task; both advance reminders through the
same conditional write, so they can run side by side.
"""
