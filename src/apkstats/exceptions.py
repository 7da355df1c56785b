"""Typed exception hierarchy for apkstats."""

from pathlib import Path


class ApkStatsError(Exception):
    """Base exception for all apkstats errors."""

    pass


class InvalidArgumentError(ApkStatsError, ValueError):
    """Raised when a required argument is missing or invalid."""

    pass


class ManifestError(ApkStatsError):
    """Base exception for failures while loading a manifest."""

    pass


class ManifestNotFoundError(ManifestError):
    """Raised when AndroidManifest.xml does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"AndroidManifest.xml not found: {path}")


class ManifestReadError(ManifestError):
    """Raised when the manifest file exists but cannot be read."""

    pass


class ManifestParseError(ManifestError):
    """Raised when the manifest is not well-formed XML."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed manifest {path}: {reason}")
