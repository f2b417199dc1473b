#!/usr/bin/env python3
"""
Kind distribution, tuning validation and lane helper tests.
"""

from __future__ import annotations

import unittest

from game.items import (
    ARCADE_KIND_TABLE,
    SKY_KIND_TABLE,
    Item,
    ItemKind,
    kind_probabilities,
    pick_kind,
)
from game.lanes import lane_from_label, lane_name
from game.tuning import (
    ARCADE_TUNING,
    SKY_TUNING,
    GameTuning,
    get_tuning,
    level_spawn_interval_ms,
)


class KindTableTests(unittest.TestCase):
    def test_sky_thresholds(self) -> None:
        cases = {
            0.999: ItemKind.FRENZY,
            0.97: ItemKind.FRENZY,
            0.9699: ItemKind.SLOW,
            0.94: ItemKind.SLOW,
            0.93: ItemKind.SHIELD,
            0.91: ItemKind.SHIELD,
            0.81: ItemKind.HAZARD,
            0.8099: ItemKind.RARE_FRUIT,
            0.61: ItemKind.RARE_FRUIT,
            0.6099: ItemKind.COMMON_FRUIT,
            0.0: ItemKind.COMMON_FRUIT,
        }
        for draw, expected in cases.items():
            self.assertIs(pick_kind(draw, SKY_KIND_TABLE), expected, msg=f"draw={draw}")

    def test_arcade_thresholds(self) -> None:
        self.assertIs(pick_kind(0.9, ARCADE_KIND_TABLE), ItemKind.HAZARD)
        self.assertIs(pick_kind(0.75, ARCADE_KIND_TABLE), ItemKind.RARE_FRUIT)
        self.assertIs(pick_kind(0.69, ARCADE_KIND_TABLE), ItemKind.COMMON_FRUIT)

    def test_probabilities_sum_to_one(self) -> None:
        for table in (SKY_KIND_TABLE, ARCADE_KIND_TABLE):
            self.assertAlmostEqual(sum(kind_probabilities(table).values()), 1.0)

    def test_sky_probabilities(self) -> None:
        probs = kind_probabilities(SKY_KIND_TABLE)
        expected = {
            ItemKind.FRENZY: 0.03,
            ItemKind.SLOW: 0.03,
            ItemKind.SHIELD: 0.03,
            ItemKind.HAZARD: 0.10,
            ItemKind.RARE_FRUIT: 0.20,
            ItemKind.COMMON_FRUIT: 0.61,
        }
        for kind, p in expected.items():
            self.assertAlmostEqual(probs[kind], p, places=9)

    def test_special_flags(self) -> None:
        self.assertTrue(ItemKind.SHIELD.is_special)
        self.assertFalse(ItemKind.HAZARD.is_special)
        self.assertTrue(ItemKind.RARE_FRUIT.is_fruit)
        self.assertFalse(ItemKind.FRENZY.is_fruit)

    def test_item_fall_and_band(self) -> None:
        item = Item(id="X", lane=1, y=84.0, kind=ItemKind.COMMON_FRUIT, points=100, speed=0.5)
        self.assertFalse(item.in_band(85.0, 95.0))
        item.fall(4.0)
        self.assertEqual(item.y, 86.0)
        self.assertTrue(item.in_band(85.0, 95.0))
        self.assertEqual(item.as_dict()["kind"], "apple")


class TuningTests(unittest.TestCase):
    def test_named_tunings(self) -> None:
        self.assertIs(get_tuning("sky"), SKY_TUNING)
        self.assertIs(get_tuning(" Arcade "), ARCADE_TUNING)
        with self.assertRaises(ValueError):
            get_tuning("nightmare")

    def test_rejects_bad_kind_tables(self) -> None:
        bad_tables = [
            (),
            ((0.5, ItemKind.HAZARD),),
            ((0.2, ItemKind.HAZARD), (0.5, ItemKind.RARE_FRUIT), (0.0, ItemKind.COMMON_FRUIT)),
            ((1.0, ItemKind.HAZARD), (0.0, ItemKind.COMMON_FRUIT)),
            ((0.5, ItemKind.HAZARD), (0.5, ItemKind.RARE_FRUIT), (0.0, ItemKind.COMMON_FRUIT)),
        ]
        for table in bad_tables:
            with self.assertRaises(ValueError, msg=str(table)):
                GameTuning(kind_table=table)

    def test_rejects_bad_constants(self) -> None:
        with self.assertRaises(ValueError):
            GameTuning(speed_growth_mode="exponential")
        with self.assertRaises(ValueError):
            GameTuning(base_fall_speed=0.0)
        with self.assertRaises(ValueError):
            GameTuning(min_spawn_interval_ms=1500.0)
        with self.assertRaises(ValueError):
            GameTuning(catch_band_min=95.0, catch_band_max=85.0)

    def test_level_spawn_interval(self) -> None:
        self.assertEqual(level_spawn_interval_ms(1, SKY_TUNING), 1000.0)
        self.assertEqual(level_spawn_interval_ms(3, SKY_TUNING), 600.0)
        self.assertEqual(level_spawn_interval_ms(4, SKY_TUNING), 400.0)
        self.assertEqual(level_spawn_interval_ms(12, SKY_TUNING), 400.0)


class LaneLabelTests(unittest.TestCase):
    def test_substring_rules(self) -> None:
        self.assertEqual(lane_from_label("Lean LEFT"), 0)
        self.assertEqual(lane_from_label("right_arm"), 2)
        self.assertEqual(lane_from_label("Centered"), 1)
        self.assertEqual(lane_from_label("MIDDLE"), 1)
        self.assertIsNone(lane_from_label("STANDING"))
        # "left" wins when both words appear.
        self.assertEqual(lane_from_label("left-right"), 0)

    def test_lane_name(self) -> None:
        self.assertEqual([lane_name(i) for i in range(3)], ["left", "center", "right"])


if __name__ == "__main__":
    unittest.main()
