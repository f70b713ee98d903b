"""Domain layer — request/command types, encoding rules, and errors.

This layer depends only on stdlib and pydantic.
It must never import from services or config.
"""
