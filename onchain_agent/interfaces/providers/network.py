from abc import ABC, abstractmethod
from typing import Iterable, Optional


class NetworkProvider(ABC):
    """Interface for providers that operate against one or more networks.

    Plugins only rely on the name and the supported networks. The
    operations specific to a provider kind are called by tools.
    """

    @abstractmethod
    def get_name(self) -> str:
        """Get the unique name of the provider."""
        pass

    @abstractmethod
    def get_supported_networks(self) -> Iterable[str]:
        """Get the networks this provider can serve."""
        pass

    def get_prompt(self) -> Optional[str]:
        """Optional provider-specific guidance appended to tool descriptions."""
        return None

    async def cleanup(self) -> None:
        """Release any resources held by the provider."""
        return None
