"""
Module loaders for located artifacts.

Both artifact kinds are loaded straight from their file path with importlib,
without touching sys.path:

    nbind.so / nbind.pyd   -> ExtensionFileLoader (CPython extension module)
    nbind.py               -> SourceFileLoader (bundle glue script)

The module name is the file name up to its first dot, which is what the
extension's PyInit_<name> symbol is compiled against. ABI-tagged names such
as nbind.cpython-312-x86_64-linux-gnu.so therefore load as 'nbind'.
"""

import importlib.machinery
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional, Type


def _load_from_file(path: Path, loader_type: Type) -> Optional[ModuleType]:
    """
    Load and execute the module at `path` with an explicit loader type.

    Returns:
        The executed module, or None if no spec could be built for it.
    """
    name = path.name.split('.', 1)[0]
    loader = loader_type(name, str(path))
    spec = importlib.util.spec_from_file_location(name, path, loader=loader)
    if spec is None or spec.loader is None:
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    return module


def load_extension(path: Path) -> Optional[ModuleType]:
    """
    Load a compiled extension module.

    Args:
        path: Resolved path to the .so/.pyd file.

    Returns:
        The loaded module, or None if importlib produced no spec.

    Example:
        addon = load_extension(Path('build/Release/nbind.so').resolve())
    """
    return _load_from_file(path, importlib.machinery.ExtensionFileLoader)


def load_bundle(path: Path) -> Optional[ModuleType]:
    """
    Import and evaluate a bundle glue script.

    The script runs top to bottom once. It fetches its exports mapping with
    pynbind.get_lib() and fires the runtime-ready hook whenever its own
    setup completes, which may be long after this call returns.
    """
    return _load_from_file(path, importlib.machinery.SourceFileLoader)
