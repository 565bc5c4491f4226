"""Adapters – concrete transports and web framework integrations.

Import the sub-packages directly; the FastAPI adapter needs the ``fastapi``
extra.
"""
