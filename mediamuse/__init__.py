"""MediaMuse - Gemini-powered creative tools."""

__version__ = "0.1.0"
