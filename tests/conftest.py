"""Shared fixtures: decompiled package directories with hand-written manifests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from apkstats.models.apk import ApkFile

FULL_MANIFEST = """<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.example" android:versionCode="4" android:installLocation="auto">
    <!-- comments are dropped -->
    <uses-sdk android:minSdkVersion="15" android:targetSdkVersion="23"/>
    <uses-permission android:name="android.permission.INTERNET"/>
    <uses-permission android:name="android.permission.CAMERA"/>
    <uses-permission/>
    <uses-feature android:name="android.hardware.camera"/>
    <supports-screens android:resizeable="true" android:anyDensity="maybe"
        android:smallScreens="false" android:largeScreens="True"/>
    <application android:label="Example">
        <uses-library android:name="com.google.android.maps"/>
        <activity android:name=".MainActivity"/>
        <activity android:name=".SettingsActivity"/>
        <activity android:name=".AboutActivity"/>
        <service android:name=".SyncService"/>
    </application>
</manifest>
"""

ManifestFactory = Callable[..., ApkFile]


@pytest.fixture
def make_package(tmp_path: Path) -> ManifestFactory:
    """Create a decompiled package directory, optionally with a manifest."""

    def _make(
        manifest: str | bytes | None = None,
        name: str = "com.example",
        root: Path | None = None,
    ) -> ApkFile:
        directory = (root or tmp_path) / name
        directory.mkdir(parents=True, exist_ok=True)
        if isinstance(manifest, str):
            (directory / "AndroidManifest.xml").write_text(manifest, encoding="utf-8")
        elif isinstance(manifest, bytes):
            (directory / "AndroidManifest.xml").write_bytes(manifest)
        return ApkFile.from_directory(directory)

    return _make


@pytest.fixture
def full_package(make_package: ManifestFactory) -> ApkFile:
    return make_package(FULL_MANIFEST)
