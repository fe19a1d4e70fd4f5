"""Core models and schemas for API contracts."""
