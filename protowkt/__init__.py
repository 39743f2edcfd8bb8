"""Protocol Buffers well-known types Duration, Timestamp and Any, plus code-info records."""

__version__ = "0.12.0"
__all__ = ["any", "codeinfo", "duration", "timestamp"]