"""Pydantic models for AndroidManifest.xml extraction results."""

from enum import StrEnum

from pydantic import BaseModel, Field, NonNegativeInt


class TriState(StrEnum):
    """Boolean manifest attribute that may also be absent or malformed."""

    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"


class AndroidManifestData(BaseModel):
    """Facts extracted from a single AndroidManifest.xml."""

    package_name: str | None = None
    """Value of the manifest ``package`` attribute."""

    version_code: str | None = None
    """Value of ``android:versionCode`` (kept as text)."""

    install_location: str | None = None
    """Value of ``android:installLocation``."""

    number_of_activities: NonNegativeInt = 0
    number_of_services: NonNegativeInt = 0
    number_of_broadcast_receivers: NonNegativeInt = 0
    number_of_content_providers: NonNegativeInt = 0

    uses_permissions: list[str] = Field(default_factory=list)
    """``android:name`` of every ``uses-permission`` element, in document order."""

    uses_libraries: list[str] = Field(default_factory=list)
    """``android:name`` of every ``uses-library`` element, in document order."""

    uses_features: list[str] = Field(default_factory=list)
    """``android:name`` of every ``uses-feature`` element, in document order."""

    uses_target_sdk_version: str | None = None
    """Raw ``android:targetSdkVersion``; empty string if the attribute is absent."""

    uses_min_sdk_version: str | None = None
    """Raw ``android:minSdkVersion``; empty string if the attribute is absent."""

    uses_max_sdk_version: str | None = None
    """Raw ``android:maxSdkVersion``; empty string if the attribute is absent."""

    supports_screens_resizeable: TriState = TriState.UNKNOWN
    supports_screens_any_density: TriState = TriState.UNKNOWN
    supports_screens_small: TriState = TriState.UNKNOWN
    supports_screens_normal: TriState = TriState.UNKNOWN
    supports_screens_large: TriState = TriState.UNKNOWN
    supports_screens_xlarge: TriState = TriState.UNKNOWN

    @property
    def number_of_components(self) -> int:
        """Total number of declared app components."""
        return (
            self.number_of_activities
            + self.number_of_services
            + self.number_of_broadcast_receivers
            + self.number_of_content_providers
        )
