"""Domain layer: duty kinds, date rules, and record models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
