"""Process-level wiring of the gateway and the components built on it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_BASE_URL, Settings
from .db.gateway import PersistenceGateway
from .draws import DrawResultRecorder
from .intake import TicketIntakeValidator
from .locator import ticket_locator
from .rounds import RoundLifecycleManager
from .tickets import TicketIssuer


@dataclass
class LottoServices:
    """Everything a request handler or admin script needs, sharing one pool.

    Build once at startup with :meth:`from_settings` and call :meth:`close`
    (or use it as a context manager) at shutdown.
    """

    gateway: PersistenceGateway
    validator: TicketIntakeValidator
    rounds: RoundLifecycleManager
    draws: DrawResultRecorder
    tickets: TicketIssuer
    base_url: str

    @classmethod
    def from_gateway(
        cls,
        gateway: PersistenceGateway,
        *,
        settings: Optional[Settings] = None,
    ) -> "LottoServices":
        validator = TicketIntakeValidator(settings.rules) if settings else TicketIntakeValidator()
        return cls(
            gateway=gateway,
            validator=validator,
            rounds=RoundLifecycleManager(gateway),
            draws=DrawResultRecorder(gateway, validator),
            tickets=TicketIssuer(gateway, validator),
            base_url=settings.base_url if settings else DEFAULT_BASE_URL,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LottoServices":
        return cls.from_gateway(
            PersistenceGateway.from_settings(settings.database), settings=settings
        )

    def locator_for(self, ticket_id) -> str:
        return ticket_locator(self.base_url, ticket_id)

    def close(self) -> None:
        self.gateway.dispose()

    def __enter__(self) -> "LottoServices":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["LottoServices"]
