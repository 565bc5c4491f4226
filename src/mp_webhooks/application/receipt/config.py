"""Application receipt – per-endpoint receiver configuration."""
from __future__ import annotations

import dataclasses

from mp_webhooks.application.receipt.contracts import (
    AdmissionFilter,
    DefaultResponseBuilder,
    NoopProcessor,
    ProcessEverything,
    ResponseBuilder,
    WebhookProcessor,
)
from mp_webhooks.config.settings import ClientSettings
from mp_webhooks.kernel.time import Clock
from mp_webhooks.protocol import SignatureValidator

__all__ = ["ReceiverConfig"]


@dataclasses.dataclass(frozen=True)
class ReceiverConfig:
    """Everything the receipt engine needs for one named endpoint.

    ``store_headers=("*",)`` keeps every header; otherwise only the listed
    names are stored, lower-cased. ``process_max_attempts`` and
    ``process_retry_delay_seconds`` are handed to the scheduler with the
    processing task.
    """

    name: str
    validator: SignatureValidator
    secret: str | bytes | None = None
    processor: WebhookProcessor = dataclasses.field(default_factory=NoopProcessor)
    admission_filter: AdmissionFilter = dataclasses.field(default_factory=ProcessEverything)
    response_builder: ResponseBuilder = dataclasses.field(default_factory=DefaultResponseBuilder)
    store_headers: tuple[str, ...] = ("*",)
    delete_after_days: int = 30
    process_max_attempts: int = 1
    process_retry_delay_seconds: float = 0

    def filter_headers(self, headers: dict[str, str]) -> dict[str, str]:
        lowered = {k.lower(): v for k, v in headers.items()}
        if "*" in self.store_headers:
            return lowered
        wanted = {h.lower() for h in self.store_headers}
        return {k: v for k, v in lowered.items() if k in wanted}

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        processor: WebhookProcessor | None = None,
        admission_filter: AdmissionFilter | None = None,
        response_builder: ResponseBuilder | None = None,
        clock: Clock | None = None,
        process_max_attempts: int = 1,
        process_retry_delay_seconds: float = 0,
    ) -> "ReceiverConfig":
        return cls(
            name=settings.name,
            validator=settings.build_validator(clock),
            secret=settings.signing_secret,
            processor=processor or NoopProcessor(),
            admission_filter=admission_filter or ProcessEverything(),
            response_builder=response_builder or DefaultResponseBuilder(),
            store_headers=settings.store_headers,
            delete_after_days=settings.delete_after_days,
            process_max_attempts=process_max_attempts,
            process_retry_delay_seconds=process_retry_delay_seconds,
        )
