"""Domain layer — invoice types, money rules, validation, and commands.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
