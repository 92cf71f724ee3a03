import pytest

from streamglob import MemoryBackend, PosixFlavour

pytest_plugins = ["streamglob._pytest_plugin"]


@pytest.fixture
def posix() -> PosixFlavour:
    return PosixFlavour()


@pytest.fixture
def empty_backend() -> MemoryBackend:
    """An empty POSIX-style in-memory tree."""
    return MemoryBackend(flavour=PosixFlavour())
