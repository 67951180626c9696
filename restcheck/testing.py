"""
pytest integration.

Enable with ``pytest_plugins = ["restcheck.testing"]`` in a ``conftest.py``.
The plugin provides a ``restcheck`` fixture (a default ``RestCheck`` context
recording every call) and a ``call_recorder`` fixture exposing what was
recorded, plus two command line options:

- ``--restcheck-config PATH`` loads the global configuration from a JSON file
- ``--restcheck-suppress-assertions`` sends requests without running assertions
"""

from typing import List, Union

import pytest

from .config import Configuration, load_configuration
from .events import (
    CallErrorEvent,
    CallFailedEvent,
    CallFinishedEvent,
    CallListener,
    CallStartedEvent,
)
from .factory import RestCheck

Event = Union[CallStartedEvent, CallFailedEvent, CallErrorEvent, CallFinishedEvent]


class RecordingListener(CallListener):
    """Keeps every published event in order."""

    def __init__(self):
        self.events: List[Event] = []

    def call_started(self, event: CallStartedEvent) -> None:
        self.events.append(event)

    def call_failed(self, event: CallFailedEvent) -> None:
        self.events.append(event)

    def call_error(self, event: CallErrorEvent) -> None:
        self.events.append(event)

    def call_finished(self, event: CallFinishedEvent) -> None:
        self.events.append(event)

    @property
    def event_types(self) -> List[type]:
        return [type(event) for event in self.events]

    @property
    def failures(self) -> List[CallFailedEvent]:
        return [event for event in self.events if isinstance(event, CallFailedEvent)]

    @property
    def errors(self) -> List[CallErrorEvent]:
        return [event for event in self.events if isinstance(event, CallErrorEvent)]

    def clear(self) -> None:
        self.events.clear()

    def assert_all_passed(self) -> None:
        """Fail the current test if any recorded call failed or errored."""
        problems = [
            f"{event.request.name}: {type(event.cause).__name__}: {event.cause}"
            for event in self.events
            if isinstance(event, (CallFailedEvent, CallErrorEvent))
        ]
        if problems:
            raise AssertionError("Calls did not pass:\n" + "\n".join(problems))


def pytest_addoption(parser):
    group = parser.getgroup("restcheck")
    group.addoption(
        "--restcheck-config",
        action="store",
        default=None,
        help="JSON file with the global restcheck configuration",
    )
    group.addoption(
        "--restcheck-suppress-assertions",
        action="store_true",
        default=False,
        help="Execute restcheck calls without running their assertions",
    )


@pytest.fixture(scope="session")
def restcheck_configuration(pytestconfig) -> Configuration:
    path = pytestconfig.getoption("restcheck_config")
    if path:
        return load_configuration(path)
    return Configuration()


@pytest.fixture
def call_recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def restcheck(pytestconfig, restcheck_configuration, call_recorder):
    context = RestCheck.default(configuration=restcheck_configuration)
    context.suppress_assertions = pytestconfig.getoption("restcheck_suppress_assertions")
    context.register_listener(call_recorder)
    yield context
    context.transport.close()
