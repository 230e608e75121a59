"""Service layer — codec operations returning ServiceResult.

Services may import from domain, codec, and config.
They must never import from commands or output.
"""
