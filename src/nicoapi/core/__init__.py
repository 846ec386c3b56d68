"""Core: domain models, contracts, configuration and the request pipeline.

Nothing in `core` imports from `adapters` or `cli`, except that the error
classifier knows httpx exception types.
"""
