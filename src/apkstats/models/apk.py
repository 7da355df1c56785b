"""Pydantic models identifying a package and its aggregate statistics."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from apkstats.models.manifest import AndroidManifestData


class ApkFile(BaseModel):
    """A package that has already been decompiled to a directory."""

    model_config = ConfigDict(frozen=True)

    decompiled_dir: Path
    """Directory holding the decompiled output (apktool layout)."""

    marker: str
    """Diagnostic tag prefixed to every log line about this package."""

    @classmethod
    def from_directory(cls, path: Path, marker: str | None = None) -> "ApkFile":
        """Build an ApkFile for a decompiled directory.

        Args:
            path: Decompiled output directory.
            marker: Diagnostic tag. Defaults to the directory name.
        """
        resolved = path.resolve()
        return cls(decompiled_dir=resolved, marker=marker or resolved.name)


class ApkData(BaseModel):
    """Per-package statistics record collecting results of all processors."""

    marker: str
    """Diagnostic tag of the package these statistics belong to."""

    android_manifest: AndroidManifestData | None = None
    """Manifest facts, set once the manifest has been processed."""

    def set_android_manifest(self, manifest: AndroidManifestData) -> None:
        """Attach extracted manifest data."""
        self.android_manifest = manifest
