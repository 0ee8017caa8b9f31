from __future__ import annotations


class ZipcodeError(ValueError):
    """Raised when an inbound request does not carry a usable `cep`."""


class UpstreamError(RuntimeError):
    """Raised when an upstream API answers with something we cannot use."""


def error_text(exc: BaseException) -> str:
    # Some httpx errors stringify to "", fall back to the class name.
    return str(exc) or exc.__class__.__name__
