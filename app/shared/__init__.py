"""Shared helpers used by core, infrastructure and API layers. No business logic."""
