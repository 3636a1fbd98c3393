"""Domain models and entities.

Why:
- Pure, strict data structures live here (Pydantic v2, frozen dataclasses).
- The domain knows nothing about HTTP, the CLI or prometheus_client.
"""
