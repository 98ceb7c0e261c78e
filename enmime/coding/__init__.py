"""Charset conversion, RFC 2047 header decoding, ID headers and content cleaners."""

__all__ = ["base64clean", "charsets", "headerext", "idheader", "quotedprint"]