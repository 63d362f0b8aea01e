"""Exception hierarchy for file-quarantine.

Configuration errors are fatal and raised before any sweep starts.
Per-file errors never escape the action executor; they are converted
into failed outcomes so a sweep can continue with the next file.
"""


class QuarantineError(Exception):
    """Base exception for all file-quarantine errors."""


class ConfigurationError(QuarantineError):
    """Base exception for errors detected before a run starts."""


class ConfigurationInvalidError(ConfigurationError):
    """Raised when the configuration cannot drive a run.

    Examples: no scan roots, no extensions, or a quarantine root
    that cannot be created.
    """


class ConfigNotFoundError(ConfigurationInvalidError):
    """Raised when the configuration file does not exist."""


class ConfigParseError(ConfigurationInvalidError):
    """Raised when the configuration file is not valid TOML."""


class ConfigurationConflictError(ConfigurationError):
    """Raised when the quarantine root overlaps a scan root."""


class PathNotFoundError(QuarantineError):
    """Raised when a scan root or quarantine root does not exist."""


class InvalidSizeFormatError(QuarantineError, ValueError):
    """Raised when a human size string such as "5MB" cannot be parsed."""


class PathOutsideScanError(QuarantineError, ValueError):
    """Raised when a path cannot be mapped into or out of the quarantine tree."""
