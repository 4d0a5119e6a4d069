"""Platform and browser classification helpers."""

from __future__ import annotations


def is_android(platform_name: str) -> bool:
    return platform_name.lower() == "android"


def is_ios(platform_name: str) -> bool:
    return platform_name.lower() == "ios"


def is_mobile(platform_name: str) -> bool:
    """Any reported platform name (Appium, Perfecto) means a mobile run."""
    return platform_name != ""


def is_firefox(browser_name: str) -> bool:
    return browser_name.lower() == "firefox"
