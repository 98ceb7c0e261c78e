"""Reader, writer, header, pipeline and connection types for line-based text protocols."""

__all__ = ["conn", "errors", "header", "keys", "pipeline", "reader", "writer"]