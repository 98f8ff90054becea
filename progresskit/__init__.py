"""Terminal progress rendering: formatting helpers, draw targets, multi-line layouts and an in-memory terminal."""

__version__ = "0.1.0"

__all__ = ["format", "in_memory", "draw_target", "multi"]