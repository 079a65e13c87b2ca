"""Infrastructure layer — database schema, engine, and the invoice store.

This layer depends on stdlib and third-party libs (SQLAlchemy, pluggy).
It must never import from services, commands, or output.
"""
