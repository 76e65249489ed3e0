"""
Error taxonomy, split by the scope allowed to handle each error.

Startup/listener scope (may end the process):
    ConfigurationError, BindError, AcceptError
Session scope (ends one worker only):
    ReadError, WriteError
"""


class TCPSError(RuntimeError):
    """Base class for all server errors."""


class ConfigurationError(TCPSError):
    """Raised when the startup argument is missing or invalid."""


class BindError(TCPSError):
    """Raised when the listening endpoint cannot be created or bound."""


class AcceptError(TCPSError):
    """Raised when the endpoint itself can no longer accept connections."""


class SessionError(TCPSError):
    """Base class for I/O failures confined to a single session."""


class ReadError(SessionError):
    pass


class WriteError(SessionError):
    pass
