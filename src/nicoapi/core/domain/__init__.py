"""Domain models and entities.

Pure, strict data structures (Pydantic v2). The domain knows nothing about
httpx, the CLI or the filesystem.
"""
