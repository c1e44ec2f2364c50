"""
Shared fixtures for the Onchain Agent test suite.
"""
from typing import Dict, Iterable, List, Optional

import pytest

from onchain_agent.domains.execution import ToolExecutionData
from onchain_agent.interfaces.providers.network import NetworkProvider


class FakeProvider(NetworkProvider):
    """Provider with a fixed name and network list."""

    def __init__(self, name: str, networks: Iterable[str], prompt: Optional[str] = None):
        self._name = name
        self._networks = list(networks)
        self._prompt = prompt
        self.cleaned_up = False

    def get_name(self) -> str:
        return self._name

    def get_supported_networks(self) -> List[str]:
        return list(self._networks)

    def get_prompt(self) -> Optional[str]:
        return self._prompt

    async def cleanup(self) -> None:
        self.cleaned_up = True

    def __repr__(self) -> str:
        return f"FakeProvider({self._name!r})"


class RecordingCallback:
    """Callable observer that keeps every event it receives."""

    def __init__(self):
        self.events: List[ToolExecutionData] = []

    def __call__(self, data: ToolExecutionData) -> None:
        self.events.append(data)

    @property
    def states(self) -> List[str]:
        return [event.state.value for event in self.events]

    def by_state(self) -> Dict[str, List[ToolExecutionData]]:
        grouped: Dict[str, List[ToolExecutionData]] = {}
        for event in self.events:
            grouped.setdefault(event.state.value, []).append(event)
        return grouped


@pytest.fixture
def make_provider():
    """Factory for fake providers."""
    return FakeProvider


@pytest.fixture
def recorder():
    """A fresh recording observer."""
    return RecordingCallback()

