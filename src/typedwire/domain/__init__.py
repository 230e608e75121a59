"""Domain layer — envelope tags, value sentinels, and JSON type aliases.

This layer depends only on stdlib.
It must never import from codec, services, commands, or config.
"""
