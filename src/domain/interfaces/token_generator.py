"""Token generator interface."""

from abc import ABC, abstractmethod

from src.domain.value_objects.confirmation_token import ConfirmationToken


class ITokenGenerator(ABC):
    """Produces unguessable, opaque confirmation tokens."""

    @abstractmethod
    def generate(self) -> ConfirmationToken:
        """Generate a new token.

        Raises:
            EntropySourceUnavailableError: If the secure random source fails
        """
        pass
