"""Vibe Engine - prompt-to-project generation service"""

__version__ = "1.0.0"
