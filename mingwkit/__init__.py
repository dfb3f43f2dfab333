"""
MingwKit - MSYS2/mingw-w64 build environment bootstrapper for cgo projects on Windows.
"""

__version__ = "0.1.0"
