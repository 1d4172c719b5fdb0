"""Core layer: script generation, bridge execution, responses and errors."""
