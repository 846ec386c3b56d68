"""Adapters: httpx transport, credential sources and resource modules."""
