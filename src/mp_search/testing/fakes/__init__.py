"""Testing fakes – in-memory doubles for kernel and application ports."""
from mp_search.kernel.time import FrozenClock
from mp_search.testing.fakes.clock import FakeClock
from mp_search.testing.fakes.transport import InMemorySearchTransport, RecordedCall

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemorySearchTransport",
    "RecordedCall",
]
