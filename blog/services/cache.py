from abc import ABC, abstractmethod
from typing import Optional, Any

class Cache(ABC):
    """Minimal cache interface to enable swapping backends (memory, Redis, none) without changing callers.

    Values are JSON-compatible payloads; callers must not mutate what they get back.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...
