"""Infrastructure layer — durable key-value storage and reduction oracles.

This layer depends on stdlib, SQLAlchemy, and the domain layer.
It must never import from services, commands, or output.
"""
