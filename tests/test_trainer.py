from __future__ import annotations

import unittest

from tiny_slm.alphabet import AlphabetConfig, normalize_byte
from tiny_slm.store import ContextStore
from tiny_slm.trainer import History, Trainer


class NormalizationTests(unittest.TestCase):
    def test_printable_bytes_pass_through(self) -> None:
        for value in (32, ord("a"), ord("~"), 126):
            self.assertEqual(normalize_byte(value), chr(value))

    def test_newline_and_tab_fold_to_space(self) -> None:
        self.assertEqual(normalize_byte(ord("\n")), " ")
        self.assertEqual(normalize_byte(ord("\t")), " ")

    def test_other_bytes_are_rejected(self) -> None:
        for value in (0, ord("\r"), 31, 127, 200, 255):
            self.assertIsNone(normalize_byte(value))

    def test_normalize_text_skips_rejected_characters(self) -> None:
        alphabet = AlphabetConfig()
        self.assertEqual("".join(alphabet.normalize_text("a\tb\r\ncé")), "a b c")

    def test_whitespace_folds_before_range_check(self) -> None:
        self.assertEqual(normalize_byte(ord("\n"), 0, 126), " ")
        self.assertEqual(normalize_byte(ord("\t"), 0, 126), " ")
        self.assertEqual(normalize_byte(13, 0, 126), "\r")

    def test_narrowed_range_folds_to_fill_char(self) -> None:
        alphabet = AlphabetConfig(start=33, end=126, fill_char="_", fallback="abc")
        self.assertEqual(alphabet.fold_char, "_")
        self.assertEqual(alphabet.normalize(ord("\n")), "_")
        self.assertIsNone(alphabet.normalize(ord(" ")))
        self.assertEqual("".join(alphabet.normalize_text("a b\tc")), "ab_c")

    def test_range_conflicts_name_the_setting_to_override(self) -> None:
        with self.assertRaisesRegex(ValueError, "TINYSLM_FALLBACK_ALPHABET"):
            AlphabetConfig(start=33)
        with self.assertRaisesRegex(ValueError, "TINYSLM_FILL_CHAR"):
            AlphabetConfig(start=33, fallback="abc")

    def test_invalid_alphabet_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            AlphabetConfig(start=100, end=50)
        with self.assertRaises(ValueError):
            AlphabetConfig(fallback="")
        with self.assertRaises(ValueError):
            AlphabetConfig(fallback="ab\x7f")


class HistoryTests(unittest.TestCase):
    def test_starts_filled_and_slides(self) -> None:
        history = History(3)
        self.assertEqual(str(history), "   ")
        self.assertEqual(history.context(0), "")
        for char in "abcd":
            history.push(char)
        self.assertEqual(str(history), "bcd")
        self.assertEqual(history.context(1), "d")
        self.assertEqual(history.context(2), "cd")
        history.reset()
        self.assertEqual(str(history), "   ")

    def test_zero_size_history_stays_empty(self) -> None:
        history = History(0)
        history.push("a")
        self.assertEqual(str(history), "")
        self.assertEqual(history.context(0), "")


class TrainerTests(unittest.TestCase):
    def _trainer(self, max_order: int) -> Trainer:
        return Trainer(ContextStore(), History(max_order))

    def test_aabc_scenario_counts(self) -> None:
        trainer = self._trainer(2)
        trainer.observe_text("aabc")
        store = trainer.store
        self.assertEqual(dict(store.counts_for("")), {"a": 2, "b": 1, "c": 1})
        self.assertEqual(store.total_for(""), 4)
        self.assertEqual(dict(store.counts_for("a")), {"a": 1, "b": 1})
        self.assertEqual(dict(store.counts_for("aa")), {"b": 1})
        self.assertEqual(dict(store.counts_for("ab")), {"c": 1})
        self.assertEqual(dict(store.counts_for(" ")), {"a": 1})
        self.assertEqual(dict(store.counts_for("  ")), {"a": 1})
        self.assertEqual(dict(store.counts_for(" a")), {"a": 1})
        self.assertEqual(str(trainer.history), "bc")

    def test_observe_reports_normalized_or_rejected(self) -> None:
        trainer = self._trainer(2)
        self.assertEqual(trainer.observe(ord("x")), "x")
        self.assertEqual(trainer.observe(ord("\n")), " ")
        before = str(trainer.history)
        self.assertIsNone(trainer.observe(7))
        self.assertEqual(str(trainer.history), before)
        self.assertEqual(trainer.store.total_for(""), 2)

    def test_repeated_update_increments_by_one(self) -> None:
        trainer = self._trainer(2)
        for expected in range(1, 4):
            trainer.history.reset()
            trainer.update("q")
            self.assertEqual(trainer.store.count("  ", "q"), expected)
            self.assertEqual(trainer.store.total_for("  "), expected)

    def test_totals_match_counts_after_training(self) -> None:
        trainer = self._trainer(4)
        trainer.observe_bytes(b"the quick brown fox jumps over the lazy dog.\nthe end\x00")
        for context in trainer.store.contexts():
            self.assertEqual(
                trainer.store.total_for(context),
                sum(count for _, count in trainer.store.counts_for(context)),
            )

    def test_observe_text_uses_alphabet_normalization(self) -> None:
        alphabet = AlphabetConfig(start=33, end=126, fill_char="_", fallback="abc")
        trainer = Trainer(ContextStore(), History(2, alphabet.fill_char), alphabet)
        self.assertEqual(trainer.observe_text("a b\nc\x07"), 4)
        self.assertEqual(dict(trainer.store.counts_for("")), {"a": 1, "b": 1, "_": 1, "c": 1})
        self.assertEqual(dict(trainer.store.counts_for("__")), {"a": 1})
        self.assertEqual(str(trainer.history), "_c")

    def test_observe_bytes_counts_accepted(self) -> None:
        trainer = self._trainer(1)
        seen: list[int] = []
        accepted = trainer.observe_bytes(b"ab\x01c", on_accept=seen.append)
        self.assertEqual(accepted, 3)
        self.assertEqual(seen, [1, 2, 3])


if __name__ == "__main__":
    unittest.main()
