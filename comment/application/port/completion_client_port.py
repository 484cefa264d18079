from abc import ABC, abstractmethod


class CompletionClientPort(ABC):
    @abstractmethod
    def complete(self, system_message: str, user_message: str) -> str | None:
        """Returns the raw model text, or None when the response carried no content."""
        raise NotImplementedError

    def close(self) -> None:
        """Releases connections held by the client."""
