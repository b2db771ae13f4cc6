"""Core domain types for neo-backoff."""
