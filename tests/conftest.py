import logging

import pytest

from pico_factory import FactoryDefinition, FactoryRegistry, FactorySet, SequenceRegistry
from pico_factory.definition_proxy import DefinitionProxy

log_capture: list[str] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(self.format(record))


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture
def captured_logs():
    handler = ListLogHandler()
    logger = logging.getLogger("pico_factory")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


class RecordingContext:
    """Build context double: records association requests instead of building."""

    def __init__(self, strategy: str = "build"):
        self.strategy = strategy
        self.requests: list[tuple] = []

    def associate(self, name, factory_name, options):
        self.requests.append((name, factory_name, dict(options)))
        return f"<{factory_name} via {self.strategy}>"


@pytest.fixture
def context():
    return RecordingContext()


@pytest.fixture
def factories():
    fs = FactorySet()
    yield fs
    fs.reset()


@pytest.fixture
def sequences():
    return SequenceRegistry()


@pytest.fixture
def registry():
    return FactoryRegistry()


@pytest.fixture
def definition():
    return FactoryDefinition("user")


@pytest.fixture
def proxy(definition, sequences, registry):
    return DefinitionProxy(definition, sequences, registry)
