"""engine/errors.py — Request-level failures raised by the forensic engine."""


class ForensicError(Exception):
    """Base class for errors that prevent a report from being produced."""


class InputRejectedError(ForensicError):
    """The input was refused before analysis (e.g. larger than the configured cap)."""


class BufferUnavailableError(ForensicError):
    """The document bytes could not be read at all."""
