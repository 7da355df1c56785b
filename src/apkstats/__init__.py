"""apkstats - statistics extraction from decompiled Android packages."""

__version__ = "0.1.0"
