#!/usr/bin/env python3
"""
Tests for the in-memory game event bus.
"""

from __future__ import annotations

import unittest

from bus import EventBus


class EventBusTests(unittest.TestCase):
    def test_poll_returns_events_in_order_and_clears(self) -> None:
        bus = EventBus()
        bus.publish("game.state", "test", {"score": 0})
        bus.publish("game.state", "test", {"score": 100})
        bus.publish("game.over", "test", {"score": 100})

        events = bus.poll("game.state")
        self.assertEqual([e.payload["score"] for e in events], [0, 100])
        self.assertLess(events[0].seq, events[1].seq)
        self.assertEqual(bus.poll("game.state"), [])
        self.assertEqual(bus.pending("game.over"), 1)
        self.assertEqual(bus.poll("unknown"), [])

    def test_full_queue_drops_oldest(self) -> None:
        bus = EventBus(max_queue=2)
        for score in (1, 2, 3):
            bus.publish("game.state", "test", {"score": score})
        self.assertEqual([e.payload["score"] for e in bus.poll("game.state")], [2, 3])
        self.assertEqual(
            bus.metrics.report(),
            {"published": 3, "delivered": 2, "dropped": 1, "listener_errors": 0},
        )

    def test_payload_is_copied(self) -> None:
        bus = EventBus()
        payload = {"items": [1, 2]}
        bus.publish("game.state", "test", payload)
        payload["items"].append(3)
        self.assertEqual(bus.poll("game.state")[0].payload, {"items": [1, 2]})

    def test_listeners_receive_events_and_failures_are_contained(self) -> None:
        bus = EventBus()
        seen = []

        def broken(_event) -> None:
            raise RuntimeError("boom")

        bus.subscribe("game.over", broken)
        bus.subscribe("game.over", seen.append)
        event_id = bus.publish("game.over", "test", {"score": 5})

        self.assertEqual([e.id for e in seen], [event_id])
        self.assertEqual(bus.metrics.listener_errors, 1)

    def test_as_dict(self) -> None:
        bus = EventBus()
        bus.publish("game.over", "bridge", {"score": 9})
        data = bus.poll("game.over")[0].as_dict()
        self.assertEqual(data["topic"], "game.over")
        self.assertEqual(data["sender"], "bridge")
        self.assertEqual(data["payload"], {"score": 9})
        self.assertEqual(data["seq"], 1)

    def test_rejects_zero_queue(self) -> None:
        with self.assertRaises(ValueError):
            EventBus(max_queue=0)


if __name__ == "__main__":
    unittest.main()
