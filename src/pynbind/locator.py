"""
Compiled artifact locator.

Searches a root directory for the output of any build tool nbind has been
built with over the years, in a fixed priority order:

    <root>/<name>                        binary copied next to the package
    <root>/build/<name>                  linked build output
    <root>/build/Debug/<name>
    <root>/build/Release/<name>
    <root>/out/Debug/<name>              legacy manual builds
    <root>/Debug/<name>
    <root>/out/Release/<name>
    <root>/Release/<name>
    <root>/build/default/<name>          legacy waf output
    <root>/<compiled>/<version>/<platform>/<arch>/<name>

The order is part of the contract: when several stale artifacts are present
at once, changing it would change which one gets loaded.

Usage:
    from pynbind.locator import find, locate

    spec = locate('/path/to/project')      # raises ExhaustedSearch
    spec = find('/path/to/project', cb)    # error-first callback
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .artifacts import REGISTRY, ArtifactSpec, HostInfo
from .errors import ExhaustedSearch

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
FindCallback = Callable[..., None]


def rethrow(err: Optional[BaseException], result=None) -> None:
    """Default callback: raise any error given to it."""
    if err is not None:
        raise err


# =============================================================================
# Candidate Paths
# =============================================================================

def make_module_path_list(root: PathLike, name: str,
                          host: Optional[HostInfo] = None) -> List[Path]:
    """
    Make the ordered list of candidate paths for one compiled file name.

    Args:
        root: Directory to search under.
        name: Canonical artifact file name, e.g. 'nbind.so'.
        host: Host identifiers for the last template. Read from the current
            process when omitted.

    Returns:
        Absolute, normalized candidate paths in priority order.
    """
    if host is None:
        host = HostInfo.current()

    templates = [
        (name,),
        ('build', name),
        ('build', 'Debug', name),
        ('build', 'Release', name),
        ('out', 'Debug', name),
        ('Debug', name),
        ('out', 'Release', name),
        ('Release', name),
        ('build', 'default', name),
        (host.compiled_dir, host.version, host.platform, host.arch, name),
    ]

    return [Path(os.path.abspath(os.path.join(root, *parts))) for parts in templates]


def resolve_module(path: PathLike) -> Path:
    """
    Prove that `path` names a loadable file.

    Any OS error while checking (permission denied, name too long) counts
    as the file not being there.

    Returns:
        The absolute path with symlinks resolved.

    Raises:
        FileNotFoundError: If there is no readable regular file at `path`.
    """
    candidate = Path(path)
    try:
        if candidate.is_file():
            return candidate.resolve()
    except OSError as err:
        raise FileNotFoundError(str(candidate)) from err
    raise FileNotFoundError(str(candidate))


# =============================================================================
# Search
# =============================================================================

def locate(root: PathLike, registry: Sequence[ArtifactSpec] = REGISTRY,
           host: Optional[HostInfo] = None) -> ArtifactSpec:
    """
    Find the first loadable artifact under `root`.

    A root carrying a known extension is first checked as a file in its own
    right. If that fails, the directory search still runs.

    Args:
        root: Directory (or direct artifact path) to search.
        registry: Artifact templates, highest priority first.
        host: Host identifiers for the target-specific template.

    Returns:
        A copy of the winning registry entry with `path` set.

    Raises:
        ExhaustedSearch: If nothing resolved. Lists every path tried.
    """
    tried: List[Path] = []
    ext = os.path.splitext(os.fspath(root))[1]

    for spec in registry:
        if ext == spec.ext:
            try:
                found = spec.with_path(resolve_module(root))
            except FileNotFoundError:
                tried.append(Path(os.path.abspath(root)))
                break

            logger.debug('Located %s artifact at %s', found.kind.name, found.path)
            return found

    for spec in registry:
        for candidate in make_module_path_list(root, spec.name, host):
            try:
                resolved = resolve_module(candidate)
            except FileNotFoundError:
                tried.append(candidate)
                continue

            found = spec.with_path(resolved)
            logger.debug('Located %s artifact at %s', found.kind.name, found.path)
            return found

    raise ExhaustedSearch(tried)


def find(root: Optional[PathLike] = None,
         callback: Optional[FindCallback] = None) -> Optional[ArtifactSpec]:
    """
    Find a compiled artifact under `root` (the working directory by default).

    Args:
        root: Directory to search.
        callback: Called as callback(err) or callback(None, spec). Without a
            callback, a failed search raises.

    Returns:
        The located spec, or None when the search failed.
    """
    if callback is None:
        callback = rethrow

    try:
        spec = locate(root or os.getcwd(), REGISTRY)
    except ExhaustedSearch as err:
        callback(err)
        return None

    callback(None, spec)
    return spec
