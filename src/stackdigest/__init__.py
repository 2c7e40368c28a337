"""stackdigest: locate the source of every frame in a native call stack."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("stackdigest")
except PackageNotFoundError:
    __version__ = "dev"
