"""
Counters for the EventBus.

Every event is counted once as published when it enters a topic queue.
After that it either leaves through poll(), which counts it as delivered,
or it is pushed out of a full queue by a newer event, which counts it as
dropped. Push listeners run on the publisher's thread. A listener that
raises is counted and logged, and the remaining listeners still run.
"""

from dataclasses import asdict, dataclass


@dataclass
class BusMetrics:
    """
    Running totals for one bus, exposed by the HTTP health endpoint.

    Attributes:
        published (int): Events accepted into a topic queue.
        delivered (int): Events drained by poll().
        dropped (int): Queued events evicted by a newer event on a full topic.
        listener_errors (int): Exceptions raised by subscribed callbacks.
    """

    published: int = 0
    delivered: int = 0
    dropped: int = 0
    listener_errors: int = 0

    def report(self) -> dict:
        """Return the counters as a plain dict, safe to serialise as JSON."""
        return asdict(self)
