"""
Tests for loading located artifacts by path.
"""
import importlib.machinery
import sys

import pytest

import pynbind.native_loader as native_loader
from tests.test_fixtures import make_artifact


class TestModuleName:
    """The module name is the file name up to its first dot."""

    def test_abi_tagged_extension_uses_base_name(self, monkeypatch, tmp_path):
        path = make_artifact(tmp_path, 'nbind.cpython-311-x86_64-linux-gnu.so')
        names = []

        class RecordingLoader:
            def __init__(self, name, location):
                names.append(name)
                raise ImportError(f'not loading {location}')

        monkeypatch.setattr(importlib.machinery, 'ExtensionFileLoader', RecordingLoader)

        with pytest.raises(ImportError):
            native_loader.load_extension(path)

        assert names == ['nbind']

    def test_dotted_bundle_name_uses_base_name(self, tmp_path):
        path = make_artifact(tmp_path, 'glue.v2.py', content=b'VALUE = 7\n')
        try:
            module = native_loader.load_bundle(path)

            assert module.__name__ == 'glue'
            assert module.VALUE == 7
            assert sys.modules['glue'] is module
        finally:
            sys.modules.pop('glue', None)

    def test_failed_bundle_is_not_left_in_sys_modules(self, tmp_path):
        path = make_artifact(tmp_path, 'broken_glue.py', content=b'raise ValueError("bad")\n')

        with pytest.raises(ValueError):
            native_loader.load_bundle(path)

        assert 'broken_glue' not in sys.modules
