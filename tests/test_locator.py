from __future__ import annotations

import unittest

from src.host.memory import MemoryGroup, MemoryTrack, make_group
from src.timeline.locator import find_note_at_or_after, find_note_index_at_or_after


def _brute_force_onset(onsets, target):
    candidates = [onset for onset in onsets if onset >= target]
    return min(candidates) if candidates else None


class FindNoteAtOrAfterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.track = MemoryTrack()
        self.ref = self.track.place(make_group([(0, 10), (10, 10), (20, 10)]))

    def test_between_notes_returns_following_note(self) -> None:
        note = find_note_at_or_after(15, self.ref)
        self.assertIsNotNone(note)
        self.assertEqual(note.onset, 20)

    def test_exact_onset_returns_that_note(self) -> None:
        self.assertEqual(find_note_at_or_after(20, self.ref).onset, 20)
        self.assertEqual(find_note_at_or_after(0, self.ref).onset, 0)

    def test_after_last_note_is_empty(self) -> None:
        self.assertIsNone(find_note_at_or_after(25, self.ref))
        self.assertEqual(find_note_index_at_or_after(25, self.ref), 3)

    def test_before_first_note_returns_first(self) -> None:
        self.assertEqual(find_note_at_or_after(-40, self.ref).onset, 0)

    def test_position_is_converted_to_group_time(self) -> None:
        shifted = self.track.place(self.ref.target, onset=100)
        self.assertEqual(find_note_at_or_after(115, shifted).onset, 20)
        self.assertEqual(find_note_at_or_after(15, shifted).onset, 0)
        self.assertIsNone(find_note_at_or_after(125, shifted))

    def test_empty_group(self) -> None:
        ref = self.track.place(MemoryGroup())
        self.assertIsNone(find_note_at_or_after(0, ref))
        self.assertEqual(find_note_index_at_or_after(0, ref), 0)

    def test_matches_linear_scan(self) -> None:
        layouts = [
            [(0, 5)],
            [(0, 5), (7, 3)],
            [(3, 2), (5, 1), (9, 4), (20, 1), (21, 9)],
            [(i * 4, 3) for i in range(17)],
        ]
        for layout in layouts:
            ref = MemoryTrack().place(make_group(layout))
            onsets = [onset for onset, _ in layout]
            for target in range(-2, onsets[-1] + 4):
                expected = _brute_force_onset(onsets, target)
                note = find_note_at_or_after(target, ref)
                with self.subTest(layout=layout, target=target):
                    self.assertEqual(None if note is None else note.onset, expected)
