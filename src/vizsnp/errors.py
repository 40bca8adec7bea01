"""Exception hierarchy for VizSNP.

File, format and configuration errors abort a pipeline run. Remote errors
abort a single batch, which the engine records and skips.
"""


class VizSNPError(Exception):
    """Base class for all VizSNP errors."""

    pass


class VariantFileError(VizSNPError, OSError):
    """Raised when the VCF file or its tabix index cannot be read."""

    pass


class FormatError(VizSNPError, ValueError):
    """Raised for a malformed header, data line or amino-acid change string."""

    pass


class ConfigError(VizSNPError, ValueError):
    """Raised for invalid settings (batch size, limit, species, ...)."""

    pass


class RemoteError(VizSNPError):
    """Raised when a remote service answers with an error or an unexpected body."""

    pass


class PipelineTimeoutError(VizSNPError, TimeoutError):
    """Raised when a poll loop or the overall pipeline deadline is exceeded."""

    pass
