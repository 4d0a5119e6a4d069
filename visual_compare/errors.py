"""Exception types raised by the capture and compare pipeline."""

from __future__ import annotations


class VisualCompareError(Exception):
    """Base class for every pipeline failure."""


class ConfigurationError(VisualCompareError):
    """Required configuration is missing or invalid."""


class InstanceQueryError(VisualCompareError):
    """The live instance returned a payload that could not be understood."""


class BaselineMissingError(VisualCompareError):
    """No baseline image exists and autosaving is disabled."""

    def __init__(self, baseline_path: str):
        self.baseline_path = baseline_path
        super().__init__(
            "Image not found, if you want to save the image as a new baseline image "
            "please provide `auto_save_baseline=True`."
        )


class BaselineCopyError(VisualCompareError):
    """Copying the actual image to the baseline folder failed."""

    def __init__(self, error: Exception):
        super().__init__(f"Image could not be copied. The following error was thrown: {error}")


class ComparisonError(VisualCompareError):
    """The diff collaborator failed while comparing two images."""
