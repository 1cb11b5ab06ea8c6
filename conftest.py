import pytest

from infrastructure.container import container


@pytest.fixture(autouse=True)
def in_memory_infrastructure():
    """Every test gets a fresh in-memory image store and event bus."""
    container.configure_for_testing()
    yield container
    container.reset()


@pytest.fixture
def image_store(in_memory_infrastructure):
    return in_memory_infrastructure.image_store()


@pytest.fixture
def event_bus(in_memory_infrastructure):
    return in_memory_infrastructure.event_bus()
