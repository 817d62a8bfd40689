"""Abstract base class for trigger dispatchers."""

from abc import ABC, abstractmethod


class TriggerDispatcher(ABC):
    """Starts the computation bound to a test identifier."""

    @abstractmethod
    async def activate(self, identifier: str) -> None:
        """Activate the unique trigger bound to the identifier.

        Returns as soon as the computation has been started; it does not wait
        for the computation to finish.

        Args:
            identifier: Test identifier (e.g., "compactPublicKeyZeroKnowledge")

        Raises:
            TriggerNotFoundError: If no trigger is bound to the identifier
            AmbiguousTriggerError: If several triggers are bound to it
            NotActivatableError: If the trigger exists but cannot be activated

        """
