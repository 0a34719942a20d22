"""
Boundary layer for external system integrations.

Handles all interactions with external systems (blob storage, metadata
database, vector index). Provides adapters for infrastructure dependencies.
"""
