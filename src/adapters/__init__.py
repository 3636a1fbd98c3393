"""Adapters: httpx transport and prometheus_client exposition."""
