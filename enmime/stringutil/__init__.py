"""String helpers for addresses, quoting-aware splitting, wrapping, random sources and UUIDs."""

__all__ = ["addr", "find", "randsource", "split", "uuidgen", "wrap"]