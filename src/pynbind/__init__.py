"""pynbind - Locate and load compiled nbind artifacts."""

from .artifacts import REGISTRY, ArtifactKind, ArtifactSpec, HostInfo
from .binding import Binding, BindingState, get_lib, init, init_async
from .errors import BindingError, BootstrapFailure, ExhaustedSearch, LoadFailure
from .locator import find, locate, make_module_path_list

__version__ = "0.1.0"

__all__ = [
    'ArtifactKind',
    'ArtifactSpec',
    'Binding',
    'BindingError',
    'BindingState',
    'BootstrapFailure',
    'ExhaustedSearch',
    'HostInfo',
    'LoadFailure',
    'REGISTRY',
    'find',
    'get_lib',
    'init',
    'init_async',
    'locate',
    'make_module_path_list',
]
