from abc import ABC, abstractmethod


class IOtpTransport(ABC):
    @abstractmethod
    async def send(self, *, contact: str, code: str) -> None:
        pass
