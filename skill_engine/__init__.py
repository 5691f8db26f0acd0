"""Intent dispatch engine for voice-assistant skills."""

__version__ = "0.1.0"
