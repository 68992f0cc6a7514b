"""
Tests for artifact descriptors, host info and the error types.
"""
import dataclasses
from pathlib import Path

import pytest

from pynbind.artifacts import REGISTRY, ArtifactKind, ArtifactSpec, HostInfo
from pynbind.errors import BootstrapFailure, ExhaustedSearch, LoadFailure


class TestRegistry:
    """The fixed two-entry candidate registry."""

    def test_addon_comes_first(self):
        assert [entry.kind for entry in REGISTRY] == [
            ArtifactKind.NATIVE_ADDON,
            ArtifactKind.ASM_BUNDLE,
        ]

    def test_names_match_extensions(self):
        for entry in REGISTRY:
            assert entry.name.endswith(entry.ext)
            assert entry.path is None

    def test_registry_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            REGISTRY[0].path = Path('/tmp/nbind.so')


class TestArtifactSpec:
    """ArtifactSpec.with_path sets the path exactly once."""

    def test_with_path_returns_copy(self):
        template = ArtifactSpec(ArtifactKind.ASM_BUNDLE, '.py', 'nbind.py')

        resolved = template.with_path(Path('/opt/app/nbind.py'))

        assert resolved.path == Path('/opt/app/nbind.py')
        assert template.path is None

    def test_resolved_path_cannot_be_replaced(self):
        resolved = ArtifactSpec(ArtifactKind.ASM_BUNDLE, '.py', 'nbind.py', Path('/a/nbind.py'))

        with pytest.raises(ValueError):
            resolved.with_path(Path('/b/nbind.py'))


class TestHostInfo:
    """HostInfo.current reads the environment at call time."""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv('NBIND_COMPILED_DIR', 'cache/nbind')

        assert HostInfo.current().compiled_dir == 'cache/nbind'

    def test_empty_env_uses_default(self, monkeypatch):
        monkeypatch.setenv('NBIND_COMPILED_DIR', '')

        assert HostInfo.current().compiled_dir == 'compiled'

    def test_host_identifiers_present(self, monkeypatch):
        monkeypatch.delenv('NBIND_COMPILED_DIR', raising=False)

        host = HostInfo.current()

        assert host.compiled_dir == 'compiled'
        assert host.version.count('.') == 2
        assert host.platform
        assert isinstance(host.arch, str)


class TestErrors:
    """Error messages and structured fields."""

    def test_exhausted_search_keeps_tries(self):
        tries = [Path('/a/nbind.so'), Path('/a/build/nbind.so')]

        err = ExhaustedSearch(tries)

        assert err.tries == tries
        assert str(err) == 'Could not locate the bindings file. Tried:\n/a/nbind.so\n/a/build/nbind.so'

    def test_load_failure_message(self):
        err = LoadFailure(Path('/a/nbind.so'), reason='bad magic')

        assert err.path == Path('/a/nbind.so')
        assert 'Error loading addon' in str(err)
        assert 'bad magic' in str(err)

    def test_bootstrap_failure_fields(self):
        err = BootstrapFailure(Path('/a/nbind.py'), 'nbind_init')

        assert err.entry_point == 'nbind_init'
        assert isinstance(err, RuntimeError)
