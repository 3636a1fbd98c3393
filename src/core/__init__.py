"""Core: configuration, domain, interfaces and push services."""
