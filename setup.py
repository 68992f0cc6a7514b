"""
Setup script for pynbind.

Usage:
    pip install -e .           # Editable install
    pip install -e ".[test]"   # With test dependencies

pynbind only locates and loads compiled nbind artifacts; it builds no
extensions of its own. Artifacts are expected in one of the build output
folders listed in pynbind/locator.py, e.g.:
    - build/Release/nbind.so   (nbind.pyd on Windows)
    - build/nbind.py           (bundle glue script)
"""

from setuptools import setup, find_packages


setup(
    name='pynbind',
    version='0.1.0',
    description='Locate and load compiled nbind artifacts',
    python_requires='>=3.8',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    install_requires=[],
    extras_require={
        'test': ['pytest>=7'],
    },
)
