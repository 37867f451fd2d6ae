"""Adapters connecting the contact domain to storage and transport."""
