"""Test fixtures and utilities for pynbind testing.

Organized into logical modules:
- artifacts: Helpers that lay out fake build trees and bundle glue scripts
- base_artifact_test: Base class for tests needing a scratch root directory (BaseArtifactTest)
"""

from .artifacts import (
    ADDON_NAME,
    BUNDLE_NAME,
    make_artifact,
    write_bundle,
    fake_addon_module,
    reset_current_binding,
)
from .base_artifact_test import BaseArtifactTest

__all__ = [
    'ADDON_NAME',
    'BUNDLE_NAME',
    'make_artifact',
    'write_bundle',
    'fake_addon_module',
    'reset_current_binding',
    'BaseArtifactTest',
]
