"""
Binding initializer.

Locates a compiled artifact and loads it into the running interpreter,
producing one Binding whatever the artifact kind:

- NATIVE_ADDON: the extension module is loaded synchronously and its public
  names are copied into the binding's exports.
- ASM_BUNDLE: the glue script is evaluated, and the binding completes only
  when the bundle fires its runtime-ready hook and the 'nbind_init'
  bootstrap entry point succeeds.

Usage:
    from pynbind import init, init_async

    def on_ready(err, binding=None):
        if err:
            raise err
        binding.lib['greet']('world')

    init('/path/to/project', callback=on_ready)

    # Or, from a coroutine:
    binding = await init_async('/path/to/project')

Completion is always reported through the callback, exactly once. Without a
callback, a failure is re-raised where it is reported.

Limitation: bundle glue has no way to be told which initialization loaded
it, so it reads the process-wide current binding through get_lib(). Only one
bundle initialization may be in flight at a time; starting another one
before the first is ready warns and takes over the slot.
"""

import asyncio
import logging
import os
import warnings
from collections.abc import Mapping
from enum import Enum
from types import ModuleType
from typing import Any, Callable, Dict, MutableMapping, Optional

from . import native_loader
from .artifacts import REGISTRY, ArtifactKind, ArtifactSpec
from .errors import BootstrapFailure, ExhaustedSearch, LoadFailure
from .locator import PathLike, locate, rethrow

logger = logging.getLogger(__name__)

InitCallback = Callable[..., None]

# Called by name through the bundle's ccall once its runtime is up
BOOTSTRAP_ENTRY_POINT = 'nbind_init'


class BindingState(Enum):
    """Lifecycle of one initialization call."""
    START = 'start'
    LOCATING = 'locating'
    LOCATE_FAILED = 'locate_failed'
    LOCATED = 'located'
    LOADING = 'loading'
    LOAD_FAILED = 'load_failed'
    AWAITING_RUNTIME = 'awaiting_runtime'
    BOOTSTRAP_FAILED = 'bootstrap_failed'
    READY = 'ready'


class Binding:
    """
    A compiled artifact together with its exported API.

    Attributes:
        artifact: The located ArtifactSpec (kind and absolute path).
        exports: Mapping of exported names to values.
        state: Current BindingState of the initialization that owns it.
    """

    def __init__(self):
        self.artifact: Optional[ArtifactSpec] = None
        self.exports: Optional[MutableMapping[str, Any]] = None
        self.state = BindingState.START

    @property
    def lib(self) -> Optional[MutableMapping[str, Any]]:
        """Exported API of the compiled library."""
        return self.exports

    def bind(self, name: str, proto: type) -> None:
        """Bind a value type (a class with a from_js method) to its C++ equivalent."""
        lib = self.exports or {}
        if lib.get('_nbind_value'):
            lib['_nbind_value'](name, proto)
        elif lib.get('NBind') is not None:
            lib['NBind'].bind_value(name, proto)

    def _attach(self, artifact: ArtifactSpec, exports: MutableMapping[str, Any]) -> None:
        # Both fields are set together so neither is ever seen without the other
        self.artifact, self.exports = artifact, exports

    def __repr__(self):
        path = self.artifact.path if self.artifact else None
        return f'Binding(state={self.state.value}, path={path})'


# =============================================================================
# Current Binding
# =============================================================================

_current_binding: Optional[Binding] = None


def get_lib() -> MutableMapping[str, Any]:
    """
    Exports of the binding currently being initialized.

    Called from bundle glue while it is being evaluated, since the glue
    cannot be handed its binding any other way.

    Raises:
        RuntimeError: If no bundle initialization has started.
    """
    if _current_binding is None:
        raise RuntimeError('No bundle initialization has started')
    return _current_binding.exports


def _publish(binding: Binding) -> None:
    global _current_binding
    previous = _current_binding
    if previous is not None and previous.state is BindingState.AWAITING_RUNTIME:
        warnings.warn(
            f'Bundle initialization started while {previous!r} is still awaiting '
            'its runtime; concurrent bundle initializations share one slot',
            RuntimeWarning,
        )
    _current_binding = binding


class _Settle:
    """Reports an initialization result to the caller's callback exactly once."""

    def __init__(self, callback: InitCallback, binding: Binding):
        self._callback = callback
        self._binding = binding
        self.done = False
        # Whatever the caller's callback raised, told apart from bundle errors
        self.callback_error: Optional[BaseException] = None

    def __call__(self, err: Optional[BaseException], state: BindingState) -> None:
        if self.done:
            warnings.warn(
                f'{self._binding!r} already settled; ignoring late {state.value} report',
                RuntimeWarning,
            )
            return

        self.done = True
        self._binding.state = state
        try:
            if err is not None:
                self._callback(err)
            else:
                logger.debug('Binding ready: %s', self._binding.artifact.path)
                self._callback(None, self._binding)
        except BaseException as callback_err:
            self.callback_error = callback_err
            raise


# =============================================================================
# Kind Initializers
# =============================================================================

def _init_asm(binding: Binding, settle: _Settle) -> None:
    """Evaluate bundle glue and finish once its runtime reports ready."""
    lib = binding.exports
    path = binding.artifact.path

    if not lib.get('locate_file'):
        def locate_file(name: str) -> str:
            return os.path.abspath(os.path.join(os.path.dirname(path), name))

        lib['locate_file'] = locate_file

    runtime_initialized = lib.get('on_runtime_initialized')

    def on_runtime_initialized(*args):
        logger.debug('Runtime ready: %s', path)
        if runtime_initialized:
            runtime_initialized(*args)

        try:
            lib['ccall'](BOOTSTRAP_ENTRY_POINT)
        except Exception as err:
            failure = BootstrapFailure(path, BOOTSTRAP_ENTRY_POINT)
            failure.__cause__ = err
            settle(failure, BindingState.BOOTSTRAP_FAILED)
            return

        settle(None, BindingState.READY)

    lib['on_runtime_initialized'] = on_runtime_initialized

    binding.state = BindingState.AWAITING_RUNTIME
    _publish(binding)

    logger.debug('Loading bundle: %s', path)
    try:
        module = native_loader.load_bundle(path)
    except Exception as err:
        if settle.done:
            # The caller's own callback raising from inside the ready hook
            if err is settle.callback_error:
                raise
            warnings.warn(
                f'Bundle {path} raised after {binding!r} settled: {err!r}',
                RuntimeWarning,
            )
            return
        failure = LoadFailure(path, reason=repr(err))
        failure.__cause__ = err
        settle(failure, BindingState.LOAD_FAILED)
        return

    if module is None:
        settle(LoadFailure(path, reason='no loader for bundle'), BindingState.LOAD_FAILED)


def _public_names(module: Any) -> Optional[Mapping]:
    if isinstance(module, Mapping):
        return module
    if isinstance(module, ModuleType):
        return {key: value for key, value in vars(module).items() if not key.startswith('__')}
    return None


def _init_addon(binding: Binding, settle: _Settle) -> None:
    """Load a native extension and copy its exports into the binding."""
    path = binding.artifact.path
    binding.state = BindingState.LOADING

    logger.debug('Loading addon: %s', path)
    try:
        module = native_loader.load_extension(path)
    except Exception as err:
        failure = LoadFailure(path, reason=repr(err))
        failure.__cause__ = err
        settle(failure, BindingState.LOAD_FAILED)
        return

    names = _public_names(module) if module is not None else None
    if names is None:
        settle(LoadFailure(path), BindingState.LOAD_FAILED)
        return

    # Copied key by key; the loaded module's value wins over a preset one
    for key, value in names.items():
        binding.exports[key] = value

    settle(None, BindingState.READY)


_INITIALIZERS: Dict[ArtifactKind, Callable[[Binding, _Settle], None]] = {
    ArtifactKind.NATIVE_ADDON: _init_addon,
    ArtifactKind.ASM_BUNDLE: _init_asm,
}

_missing = set(ArtifactKind) - set(_INITIALIZERS)
if _missing:
    raise ImportError(f'No initializer for artifact kinds: {sorted(k.name for k in _missing)}')


# =============================================================================
# Public API
# =============================================================================

def init(root: Optional[PathLike] = None,
         exports: Optional[MutableMapping[str, Any]] = None,
         callback: Optional[InitCallback] = None) -> None:
    """
    Locate and initialize the compiled artifact under `root`.

    Args:
        root: Directory (or direct artifact path) to search. Defaults to
            the working directory.
        exports: Preset exports mapping. Becomes the binding's exports, so
            bundle options such as 'locate_file' or 'on_runtime_initialized'
            can be passed in here.
        callback: Called once as callback(err) or callback(None, binding).
            Without one, failures are raised.
    """
    if callback is None:
        callback = rethrow

    binding = Binding()
    settle = _Settle(callback, binding)

    binding.state = BindingState.LOCATING
    try:
        artifact = locate(root or os.getcwd(), REGISTRY)
    except ExhaustedSearch as err:
        settle(err, BindingState.LOCATE_FAILED)
        return

    binding._attach(artifact, exports if exports is not None else {})
    binding.state = BindingState.LOCATED

    _INITIALIZERS[artifact.kind](binding, settle)


async def init_async(root: Optional[PathLike] = None,
                     exports: Optional[MutableMapping[str, Any]] = None) -> Binding:
    """
    Coroutine form of init().

    Resolves with the ready Binding or raises the reported error. Cancelling
    the awaiting task does not abort a bundle that is still loading; wrap the
    call in asyncio.wait_for for a timeout.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _resolve(err, binding=None):
        if future.done():
            return
        if err is not None:
            future.set_exception(err)
        else:
            future.set_result(binding)

    def callback(err, binding=None):
        # The bundle may fire its ready hook from another thread
        loop.call_soon_threadsafe(_resolve, err, binding)

    init(root, exports, callback)
    return await future
