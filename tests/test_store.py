from __future__ import annotations

import unittest

from tiny_slm.store import ContextStore


class ContextStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = ContextStore()

    def test_unseen_context_has_no_total(self) -> None:
        self.assertIsNone(self.store.total_for("ab"))
        self.assertEqual(list(self.store.counts_for("ab")), [])
        self.assertNotIn("ab", self.store)

    def test_record_creates_and_increments_entries(self) -> None:
        self.store.record(1, "a", "b")
        self.assertEqual(self.store.total_for("a"), 1)
        self.assertEqual(self.store.count("a", "b"), 1)
        self.store.record(1, "a", "b")
        self.store.record(1, "a", "c")
        self.assertEqual(self.store.total_for("a"), 3)
        self.assertEqual(dict(self.store.counts_for("a")), {"b": 2, "c": 1})

    def test_counts_enumerate_in_first_observed_order(self) -> None:
        for char in "zyzx":
            self.store.record(0, "", char)
        self.assertEqual([char for char, _ in self.store.counts_for("")], ["z", "y", "x"])

    def test_totals_match_sum_of_counts(self) -> None:
        for context, char in [("", "a"), ("q", "u"), ("q", "u"), ("", "b"), ("q", "a"), ("th", "e")]:
            self.store.record(len(context), context, char)
        for context in self.store.contexts():
            self.assertEqual(
                self.store.total_for(context),
                sum(count for _, count in self.store.counts_for(context)),
            )

    def test_stats_and_clear(self) -> None:
        self.store.record(0, "", "a")
        self.store.record(1, "a", "a")
        self.store.record(1, "b", "a")
        self.store.record(1, "b", "c")
        stats = self.store.stats()
        self.assertEqual(stats.contexts, 3)
        self.assertEqual(stats.entries, 4)
        self.assertEqual(stats.observations, 4)
        self.assertEqual(stats.contexts_per_order, {0: 1, 1: 2})
        self.assertIn("contexts=3", stats.describe())

        self.store.clear()
        self.assertEqual(len(self.store), 0)
        self.assertIsNone(self.store.total_for(""))
        self.assertEqual(self.store.stats().observations, 0)


if __name__ == "__main__":
    unittest.main()
