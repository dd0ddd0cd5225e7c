"""
Boundary layer for external system integrations.

Handles all interactions with external systems (databases, vector stores, APIs).
Provides adapters and clients for infrastructure dependencies.
"""
