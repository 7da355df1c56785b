from pathlib import Path

import pytest

from apkstats.exceptions import ManifestNotFoundError, ManifestParseError
from apkstats.models.manifest import TriState
from apkstats.utils.xml import (
    count_elements_by_tag,
    get_attribute,
    get_boolean_attribute,
    get_non_empty_string_attribute,
    get_single_appearing_element_by_tag,
    get_tag_attribute_values,
    load_normalized_document,
)

ANDROID = 'xmlns:android="http://schemas.android.com/apk/res/android"'


def _load(tmp_path: Path, text: str):
    path = tmp_path / "doc.xml"
    path.write_text(text, encoding="utf-8")
    return load_normalized_document(path)


def test_missing_file_raises_not_found(tmp_path):
    with pytest.raises(ManifestNotFoundError):
        load_normalized_document(tmp_path / "absent.xml")


def test_directory_is_not_a_manifest(tmp_path):
    with pytest.raises(ManifestNotFoundError):
        load_normalized_document(tmp_path)


@pytest.mark.parametrize("text", ["", "<manifest>", "not xml at all", "<a></b>"])
def test_malformed_xml_raises_parse_error(tmp_path, text):
    with pytest.raises(ManifestParseError):
        _load(tmp_path, text)


def test_comments_and_blank_text_are_removed(tmp_path):
    document = _load(tmp_path, "<manifest>\n  <!-- note -->\n  <application/>\n</manifest>")
    root = document.getroot()
    assert [child.tag for child in root] == ["application"]


def test_single_element_returns_first_match(tmp_path):
    document = _load(
        tmp_path,
        f'<manifest {ANDROID}><uses-sdk android:minSdkVersion="9"/>'
        '<uses-sdk android:minSdkVersion="21"/></manifest>',
    )
    element = get_single_appearing_element_by_tag(document, "uses-sdk")
    assert element is not None
    assert get_attribute(element, "android:minSdkVersion") == "9"


def test_single_element_absent(tmp_path):
    document = _load(tmp_path, "<manifest/>")
    assert get_single_appearing_element_by_tag(document, "uses-sdk") is None


def test_count_is_unscoped_by_parent(tmp_path):
    document = _load(
        tmp_path,
        "<manifest><activity/><application><activity/><activity><activity/>"
        "</activity></application></manifest>",
    )
    assert count_elements_by_tag(document, "activity") == 4
    assert count_elements_by_tag(document, "provider") == 0


def test_attribute_values_skip_missing_and_empty(tmp_path):
    document = _load(
        tmp_path,
        f'<manifest {ANDROID}><uses-permission android:name="A"/><uses-permission/>'
        '<uses-permission android:name=""/><application>'
        '<uses-permission android:name="B"/></application></manifest>',
    )
    assert get_tag_attribute_values(document, "uses-permission", "android:name") == [
        "A",
        "B",
    ]


def test_attribute_lookup_follows_declared_prefix(tmp_path):
    document = _load(
        tmp_path,
        '<manifest xmlns:a="http://schemas.android.com/apk/res/android" '
        'a:versionCode="7"/>',
    )
    root = document.getroot()
    assert get_attribute(root, "a:versionCode") == "7"
    assert get_attribute(root, "android:versionCode") == "7"


def test_unprefixed_attribute(tmp_path):
    document = _load(tmp_path, '<manifest package="com.example" other=""/>')
    root = document.getroot()
    assert get_non_empty_string_attribute(root, "package") == "com.example"
    assert get_non_empty_string_attribute(root, "other") is None
    assert get_non_empty_string_attribute(root, "missing") is None
    assert get_attribute(root, "missing") == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('android:flag="true"', TriState.TRUE),
        ('android:flag="false"', TriState.FALSE),
        ('android:flag="True"', TriState.UNKNOWN),
        ('android:flag="maybe"', TriState.UNKNOWN),
        ('android:flag=""', TriState.UNKNOWN),
        ("", TriState.UNKNOWN),
    ],
)
def test_boolean_attribute_is_tri_state(tmp_path, raw, expected):
    document = _load(tmp_path, f"<manifest {ANDROID}><screens {raw}/></manifest>")
    element = get_single_appearing_element_by_tag(document, "screens")
    assert get_boolean_attribute(element, "android:flag") is expected


def test_attribute_values_drop_repeats_keeping_first_order(tmp_path):
    document = _load(
        tmp_path,
        f'<manifest {ANDROID}><uses-feature android:name="B"/>'
        '<uses-feature android:name="A"/><uses-feature android:name="B"/>'
        "</manifest>",
    )
    assert get_tag_attribute_values(document, "uses-feature", "android:name") == [
        "B",
        "A",
    ]


def test_undeclared_prefix_is_recovered(tmp_path):
    document = _load(
        tmp_path,
        '<manifest package="com.example" android:versionCode="4">'
        '<uses-permission android:name="android.permission.INTERNET"/></manifest>',
    )
    root = document.getroot()
    assert get_attribute(root, "package") == "com.example"
    assert get_attribute(root, "android:versionCode") == "4"
    assert get_tag_attribute_values(document, "uses-permission", "android:name") == [
        "android.permission.INTERNET"
    ]


def test_recovery_does_not_hide_other_syntax_errors(tmp_path):
    with pytest.raises(ManifestParseError):
        _load(tmp_path, '<manifest android:versionCode="4"><application></manifest>')
