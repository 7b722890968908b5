"""Shared building blocks: errors, structured logging, constants."""
