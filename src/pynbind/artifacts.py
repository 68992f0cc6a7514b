"""
Artifact descriptors and the host information used to find them.

An artifact is the compiled output of an nbind build. It comes in two kinds:

- NATIVE_ADDON: a CPython extension module (nbind.so, nbind.pyd on Windows)
- ASM_BUNDLE: an emscripten-style bundle whose Python glue script is nbind.py

Usage:
    from pynbind.artifacts import REGISTRY, HostInfo

    for spec in REGISTRY:
        print(spec.kind, spec.name)

    host = HostInfo.current()
    # HostInfo(compiled_dir='compiled', version='3.12.4', platform='linux', arch='x86_64')
"""

import os
import platform
import sys
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


# =============================================================================
# Configuration
# =============================================================================

# Overrides the base directory of the versioned/platform-specific search path
COMPILED_DIR_ENV = 'NBIND_COMPILED_DIR'
DEFAULT_COMPILED_DIR = 'compiled'


@dataclass(frozen=True)
class HostInfo:
    """
    Host identifiers composing the last, target-specific search path.

    Attributes:
        compiled_dir: Base directory segment (NBIND_COMPILED_DIR or 'compiled').
        version: Interpreter version string, e.g. '3.12.4'.
        platform: Platform identifier, e.g. 'linux', 'darwin', 'win32'.
        arch: CPU architecture identifier, e.g. 'x86_64', 'arm64'.
    """
    compiled_dir: str
    version: str
    platform: str
    arch: str

    @classmethod
    def current(cls) -> 'HostInfo':
        """Read the environment and the running interpreter."""
        return cls(
            compiled_dir=os.environ.get(COMPILED_DIR_ENV) or DEFAULT_COMPILED_DIR,
            version=platform.python_version(),
            platform=sys.platform,
            arch=platform.machine(),
        )


# =============================================================================
# Artifact Descriptors
# =============================================================================

class ArtifactKind(Enum):
    """Closed set of artifact kinds. Each one has its own initializer."""
    NATIVE_ADDON = 'node'
    ASM_BUNDLE = 'emcc'


@dataclass(frozen=True)
class ArtifactSpec:
    """
    Compiled artifact kind and, once found, its path.

    Registry entries are templates with no path. The locator returns a copy
    with `path` set, so a resolved path is never changed afterwards.

    Attributes:
        kind: Which initializer applies.
        ext: File extension of this kind, used for the direct-path check.
        name: Fixed file name this kind is always compiled to.
        path: Absolute path proven to exist, or None before resolution.
    """
    kind: ArtifactKind
    ext: str
    name: str
    path: Optional[Path] = None

    def with_path(self, path: Path) -> 'ArtifactSpec':
        if self.path is not None:
            raise ValueError(f'Artifact {self.name} is already resolved to {self.path}')
        return replace(self, path=path)


_ADDON_EXT = '.pyd' if sys.platform == 'win32' else '.so'

# Priority is tuple order
REGISTRY: Tuple[ArtifactSpec, ...] = (
    ArtifactSpec(ArtifactKind.NATIVE_ADDON, _ADDON_EXT, f'nbind{_ADDON_EXT}'),
    ArtifactSpec(ArtifactKind.ASM_BUNDLE, '.py', 'nbind.py'),
)
