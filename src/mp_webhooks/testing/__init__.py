"""Testing – fakes for unit-testing code built on mp-webhooks."""
from mp_webhooks.testing.fakes import (
    FailingProcessor,
    FakeClock,
    InMemoryTaskScheduler,
    InMemoryWebhookStore,
    RecordingProcessor,
    RecordingPublisher,
    ScriptedTransport,
)

__all__ = [
    "FailingProcessor",
    "FakeClock",
    "InMemoryTaskScheduler",
    "InMemoryWebhookStore",
    "RecordingProcessor",
    "RecordingPublisher",
    "ScriptedTransport",
]
