"""Testing fakes – in-memory doubles for the engines' collaborators."""
from mp_webhooks.testing.fakes.clock import FakeClock
from mp_webhooks.testing.fakes.transport import ScriptedTransport, SentRequest, connection_refused
from mp_webhooks.testing.fakes.processors import FailingProcessor, RecordingProcessor
from mp_webhooks.application.receipt import InMemoryWebhookStore
from mp_webhooks.application.tasks import InMemoryTaskScheduler
from mp_webhooks.kernel.time import FrozenClock
from mp_webhooks.observability.events import RecordingPublisher

__all__ = [
    "FailingProcessor",
    "FakeClock",
    "FrozenClock",
    "InMemoryTaskScheduler",
    "InMemoryWebhookStore",
    "RecordingProcessor",
    "RecordingPublisher",
    "ScriptedTransport",
    "SentRequest",
    "connection_refused",
]
