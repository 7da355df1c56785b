"""Small XML access layer used by the manifest processors."""

from pathlib import Path

from lxml import etree

from apkstats.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestReadError,
)
from apkstats.models.manifest import TriState

ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"

# Well-known prefixes used when a document forgets to declare them
DEFAULT_NAMESPACES: dict[str, str] = {"android": ANDROID_NAMESPACE}


def _make_parser(recover: bool = False) -> etree.XMLParser:
    # A fresh parser per document; lxml parsers are not thread-safe
    return etree.XMLParser(
        recover=recover,
        remove_blank_text=True,
        remove_comments=True,
        resolve_entities=False,
        no_network=True,
    )


def _is_namespace_error(error: etree.XMLSyntaxError) -> bool:
    """Check if a parse failed only because of undeclared namespace prefixes."""
    entries = [
        entry for entry in error.error_log if entry.level >= etree.ErrorLevels.ERROR
    ]
    return bool(entries) and all(
        entry.domain == etree.ErrorDomains.NAMESPACE for entry in entries
    )


def load_normalized_document(path: Path) -> etree._ElementTree:
    """Load an XML file into a normalized document tree.

    Whitespace-only text and comments are dropped, entities are not
    resolved and no network access is allowed. A document whose only fault
    is an undeclared namespace prefix is parsed again in recovery mode;
    such attributes keep their literal ``prefix:name``.

    Args:
        path: Path to the XML file.

    Returns:
        Parsed document.

    Raises:
        ManifestNotFoundError: If the file does not exist.
        ManifestReadError: If the file cannot be read.
        ManifestParseError: If the file is not well-formed XML.
    """
    if not path.is_file():
        raise ManifestNotFoundError(path)

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ManifestReadError(f"Failed to read {path}: {e}") from e

    try:
        root = etree.fromstring(raw, _make_parser())
    except etree.XMLSyntaxError as e:
        if not _is_namespace_error(e):
            raise ManifestParseError(path, str(e)) from e
        try:
            root = etree.fromstring(raw, _make_parser(recover=True))
        except etree.XMLSyntaxError as retry_error:
            raise ManifestParseError(path, str(retry_error)) from retry_error

    if root is None:
        raise ManifestParseError(path, "document has no root element")

    return etree.ElementTree(root)


def _qualify(element: etree._Element, name: str) -> str:
    """Turn a prefixed attribute name into lxml's ``{namespace}local`` form."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return name

    namespace = element.nsmap.get(prefix) or DEFAULT_NAMESPACES.get(prefix)
    if namespace is None:
        return name
    return f"{{{namespace}}}{local}"


def get_single_appearing_element_by_tag(
    document: etree._ElementTree, tag: str
) -> etree._Element | None:
    """Return the element for a tag expected to appear once.

    Duplicates are tolerated: the first one in document order wins.
    """
    return next(document.iter(tag), None)


def count_elements_by_tag(document: etree._ElementTree, tag: str) -> int:
    """Count elements with the given tag anywhere in the document."""
    return sum(1 for _ in document.iter(tag))


def get_attribute(element: etree._Element, name: str) -> str:
    """Return raw attribute text, or an empty string when absent.

    Prefixed names that do not resolve to a namespaced attribute are also
    looked up literally, as left behind by recovered documents.
    """
    value = element.get(_qualify(element, name))
    if value is None and ":" in name:
        value = element.get(name)
    return value if value is not None else ""


def get_non_empty_string_attribute(element: etree._Element, name: str) -> str | None:
    """Return attribute text, treating absent and empty values as None."""
    value = get_attribute(element, name)
    return value or None


def get_tag_attribute_values(
    document: etree._ElementTree, tag: str, attribute: str
) -> list[str]:
    """Collect an attribute from every element with a tag.

    Args:
        document: Parsed document.
        tag: Element tag to search for.
        attribute: Attribute name, optionally prefixed (``android:name``).

    Returns:
        Distinct non-empty attribute values in order of first appearance.
        Elements without the attribute are skipped.
    """
    values: dict[str, None] = {}
    for element in document.iter(tag):
        value = get_non_empty_string_attribute(element, attribute)
        if value is not None:
            values.setdefault(value, None)
    return list(values)


def get_boolean_attribute(element: etree._Element, name: str) -> TriState:
    """Read a boolean attribute.

    Only the exact texts ``true`` and ``false`` are recognised; anything
    else, including a missing attribute, is UNKNOWN.
    """
    value = get_attribute(element, name)
    if value == "true":
        return TriState.TRUE
    if value == "false":
        return TriState.FALSE
    return TriState.UNKNOWN
