"""AndroidManifest.xml processing: turn a decoded manifest into statistics."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from lxml import etree

from apkstats.exceptions import InvalidArgumentError
from apkstats.models.apk import ApkData, ApkFile
from apkstats.models.manifest import AndroidManifestData
from apkstats.utils.log import get_logger, get_package_logger
from apkstats.utils.xml import (
    count_elements_by_tag,
    get_attribute,
    get_boolean_attribute,
    get_non_empty_string_attribute,
    get_single_appearing_element_by_tag,
    get_tag_attribute_values,
    load_normalized_document,
)

MANIFEST_FILE_NAME = "AndroidManifest.xml"

Document = etree._ElementTree
ManifestFields = dict[str, Any]


def extract_manifest_tag(document: Document) -> ManifestFields:
    """Read identity attributes of the root ``manifest`` element."""
    element = get_single_appearing_element_by_tag(document, "manifest")
    if element is None:
        return {}

    return {
        "package_name": get_non_empty_string_attribute(element, "package"),
        "version_code": get_non_empty_string_attribute(element, "android:versionCode"),
        "install_location": get_non_empty_string_attribute(
            element, "android:installLocation"
        ),
    }


def extract_component_counts(document: Document) -> ManifestFields:
    """Count declared components anywhere in the document."""
    return {
        "number_of_activities": count_elements_by_tag(document, "activity"),
        "number_of_services": count_elements_by_tag(document, "service"),
        "number_of_broadcast_receivers": count_elements_by_tag(document, "receiver"),
        "number_of_content_providers": count_elements_by_tag(document, "provider"),
    }


def extract_used_permissions(document: Document) -> ManifestFields:
    return {
        "uses_permissions": get_tag_attribute_values(
            document, "uses-permission", "android:name"
        )
    }


def extract_used_libraries(document: Document) -> ManifestFields:
    return {
        "uses_libraries": get_tag_attribute_values(
            document, "uses-library", "android:name"
        )
    }


def extract_used_features(document: Document) -> ManifestFields:
    return {
        "uses_features": get_tag_attribute_values(
            document, "uses-feature", "android:name"
        )
    }


def extract_uses_sdk(document: Document) -> ManifestFields:
    """Read SDK constraints verbatim from ``uses-sdk``.

    Values are not parsed as numbers; a missing attribute yields "".
    """
    element = get_single_appearing_element_by_tag(document, "uses-sdk")
    if element is None:
        return {}

    return {
        "uses_target_sdk_version": get_attribute(element, "android:targetSdkVersion"),
        "uses_min_sdk_version": get_attribute(element, "android:minSdkVersion"),
        "uses_max_sdk_version": get_attribute(element, "android:maxSdkVersion"),
    }


def extract_supports_screens(document: Document) -> ManifestFields:
    """Read the ``supports-screens`` flags as tri-state values."""
    element = get_single_appearing_element_by_tag(document, "supports-screens")
    if element is None:
        return {}

    return {
        "supports_screens_resizeable": get_boolean_attribute(
            element, "android:resizeable"
        ),
        "supports_screens_any_density": get_boolean_attribute(
            element, "android:anyDensity"
        ),
        "supports_screens_small": get_boolean_attribute(element, "android:smallScreens"),
        "supports_screens_normal": get_boolean_attribute(
            element, "android:normalScreens"
        ),
        "supports_screens_large": get_boolean_attribute(element, "android:largeScreens"),
        "supports_screens_xlarge": get_boolean_attribute(
            element, "android:xlargeScreens"
        ),
    }


# Order matters only for partial results: fields of passes that ran before a
# failure are kept.
EXTRACTION_PASSES: tuple[Callable[[Document], ManifestFields], ...] = (
    extract_manifest_tag,
    extract_component_counts,
    extract_used_permissions,
    extract_used_libraries,
    extract_used_features,
    extract_uses_sdk,
    extract_supports_screens,
)


@dataclass
class ExtractionResult:
    """Outcome of processing one manifest."""

    record: AndroidManifestData
    error: Exception | None = None

    @property
    def success(self) -> bool:
        """Check if every extraction pass completed."""
        return self.error is None


class ManifestExtractor:
    """Extract statistics from the AndroidManifest.xml of a decompiled APK."""

    def __init__(
        self,
        apk_file: ApkFile,
        data: ApkData | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        """Initialize manifest extractor.

        Args:
            apk_file: Decompiled package to process.
            data: Optional aggregate record that receives the manifest data.
            logger: Logger to report progress and failures to. Defaults to
                the ``apkstats.manifest`` logger.

        Raises:
            InvalidArgumentError: If apk_file is None.
        """
        if apk_file is None:
            raise InvalidArgumentError("apk_file must not be None")

        self.apk_file = apk_file
        self.data = data
        self.log = get_package_logger(logger or get_logger("manifest"), apk_file.marker)

    @property
    def manifest_path(self) -> Path:
        """Location of the decoded manifest inside the decompiled directory."""
        return self.apk_file.decompiled_dir / MANIFEST_FILE_NAME

    def run(self) -> ExtractionResult:
        """Process the manifest, recovering from any failure.

        Returns:
            ExtractionResult with the (possibly partial) record and the error
            that stopped extraction, if any.
        """
        self.log.debug("Started processing AndroidManifest")

        fields: ManifestFields = {}
        error: Exception | None = None
        document: Document | None = None

        try:
            document = load_normalized_document(self.manifest_path)
            if get_single_appearing_element_by_tag(document, "manifest") is None:
                self.log.warning("No <manifest> element, identity fields left empty")
            for extraction_pass in EXTRACTION_PASSES:
                fields.update(extraction_pass(document))
        except Exception as e:
            error = e
            self.log.error(f"{type(e).__name__}: {e}")
        finally:
            document = None

        record = AndroidManifestData(**fields)

        if self.data is not None:
            self.data.set_android_manifest(record)

        self.log.debug("Finished processing of AndroidManifest")

        return ExtractionResult(record=record, error=error)

    def extract(self) -> AndroidManifestData:
        """Process the manifest and return whatever could be extracted.

        Never raises: failures are logged and yield a partial record.
        """
        return self.run().record


def extract_manifest(
    apk_file: ApkFile,
    data: ApkData | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> AndroidManifestData:
    """Extract manifest statistics for a single decompiled package."""
    return ManifestExtractor(apk_file, data=data, logger=logger).extract()
