"""Capability classification (pattern-table based)."""

from .core import (
    CAP_IMAGES,
    CAP_TOOLS,
    CapabilityClassifier,
    ModelCapabilities,
    capabilities,
    default_classifier,
    load_capability_table,
    reset_default_classifier,
)

__all__ = [
    "CAP_IMAGES",
    "CAP_TOOLS",
    "CapabilityClassifier",
    "ModelCapabilities",
    "capabilities",
    "default_classifier",
    "load_capability_table",
    "reset_default_classifier",
]
