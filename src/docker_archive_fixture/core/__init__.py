"""Core types for archive builds."""
