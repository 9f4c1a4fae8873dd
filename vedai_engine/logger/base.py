"""Logger interface implemented by every engine logger."""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Structured logger: each call takes a message plus keyword fields."""

    @abstractmethod
    def get_session_id(self) -> str:
        pass

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        pass
