"""MIME e-mail helpers: part matching, content coding, string utilities and text-protocol I/O."""

__version__ = "0.1.0"
__all__ = ["match", "coding", "stringutil", "textproto"]