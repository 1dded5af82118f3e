"""Domain layer — expressions, library, history, workspace transitions.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
