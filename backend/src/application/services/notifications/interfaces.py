"""
Notification Service Interfaces
Outbound email transport contract
"""
from abc import ABC, abstractmethod


class IEmailTransport(ABC):
    """Email transport interface"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> None:
        """
        Deliver one HTML email

        A single best-effort attempt; callers own any retry policy.

        Raises:
            EmailDeliveryException: when the message was not accepted
        """
        pass
