"""Exception hierarchy for Seedarr."""


class SeedarrError(Exception):
    """Base exception for Seedarr errors."""

    pass


class ConfigError(SeedarrError):
    """Invalid or unusable configuration."""

    pass


class RadarrError(SeedarrError):
    """Radarr API request failed."""

    pass


class AnalysisError(SeedarrError):
    """mediainfo could not be run or its output could not be parsed."""

    pass


class ExportError(SeedarrError):
    """A filesystem export step failed."""

    pass


class PackagingError(SeedarrError):
    """Torrent creation failed."""

    pass
