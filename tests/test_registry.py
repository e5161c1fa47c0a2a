from __future__ import annotations

import random
import tempfile
import unittest
from pathlib import Path

from fakes import RecordingMediaStore, raws

from tombola.core.registry import Registry


class RegistryTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = RecordingMediaStore(Path(self.tmp.name))
        self.registry = Registry(self.store, capacity=90)

    def tearDown(self):
        self.tmp.cleanup()

    def assertDense(self):
        self.assertEqual(self.registry.ids(), list(range(1, len(self.registry) + 1)))

    def names(self) -> list[str]:
        return [e.display_name for e in self.registry.entries]


class AddTests(RegistryTestCase):
    def test_add_assigns_contiguous_ids(self):
        self.assertEqual(self.registry.add(raws(3)), 3)
        self.assertEqual(self.registry.ids(), [1, 2, 3])
        self.assertEqual(self.names(), ["clip1.mp3", "clip2.mp3", "clip3.mp3"])
        self.assertEqual(self.registry.add(raws(2, prefix="more")), 2)
        self.assertEqual(self.registry.ids(), [1, 2, 3, 4, 5])
        self.assertEqual(self.registry.get(4).display_name, "more1.mp3")

    def test_add_95_accepts_exactly_90(self):
        accepted = self.registry.add(raws(95))
        self.assertEqual(accepted, 90)
        self.assertEqual(self.registry.ids(), list(range(1, 91)))
        self.assertTrue(self.registry.is_full)
        # Dropped items are never registered with the store.
        self.assertEqual(len(self.store.registered), 90)

    def test_add_truncates_to_remaining_slots(self):
        registry = Registry(self.store, capacity=5)
        registry.add(raws(3))
        self.assertEqual(registry.add(raws(4, prefix="x")), 2)
        self.assertEqual(registry.ids(), [1, 2, 3, 4, 5])
        self.assertEqual(registry.get(5).display_name, "x2.mp3")

    def test_add_when_full_is_noop(self):
        registry = Registry(self.store, capacity=2)
        registry.add(raws(2))
        self.assertEqual(registry.add(raws(1, prefix="late")), 0)
        self.assertEqual(len(registry), 2)
        self.assertEqual(registry.remaining, 0)

    def test_add_writes_media_files(self):
        self.registry.add(raws(2))
        for entry in self.registry.entries:
            self.assertTrue(Path(entry.media_ref.path).exists())

    def test_capacity_must_be_positive(self):
        with self.assertRaises(ValueError):
            Registry(self.store, capacity=0)


class RemoveTests(RegistryTestCase):
    def test_remove_renumbers_and_releases(self):
        self.registry.add(raws(3))
        second = self.registry.get(2)
        self.assertTrue(self.registry.remove(2))
        self.assertEqual(self.registry.ids(), [1, 2])
        self.assertEqual(self.names(), ["clip1.mp3", "clip3.mp3"])
        self.assertEqual(self.store.released, [second.media_ref])
        self.assertFalse(Path(second.media_ref.path).exists())

    def test_remove_missing_is_noop(self):
        self.registry.add(raws(2))
        self.assertFalse(self.registry.remove(7))
        self.assertFalse(self.registry.remove(0))
        self.assertEqual(self.registry.ids(), [1, 2])
        self.assertEqual(self.store.released, [])


class MoveTests(RegistryTestCase):
    def test_move_down_swaps_and_renumbers(self):
        self.registry.add(raws(3))
        self.assertTrue(self.registry.move_adjacent(0, "down"))
        self.assertEqual(self.names(), ["clip2.mp3", "clip1.mp3", "clip3.mp3"])
        self.assertDense()

    def test_move_up_swaps_and_renumbers(self):
        self.registry.add(raws(3))
        self.assertTrue(self.registry.move_adjacent(2, "up"))
        self.assertEqual(self.names(), ["clip1.mp3", "clip3.mp3", "clip2.mp3"])
        self.assertEqual(self.registry.get(2).display_name, "clip3.mp3")

    def test_move_at_boundaries_is_identity(self):
        self.registry.add(raws(3))
        before = self.names()
        self.assertFalse(self.registry.move_adjacent(0, "up"))
        self.assertFalse(self.registry.move_adjacent(2, "down"))
        self.assertFalse(self.registry.move_adjacent(5, "up"))
        self.assertFalse(self.registry.move_adjacent(-1, "down"))
        self.assertEqual(self.names(), before)
        self.assertDense()

    def test_move_rejects_unknown_direction(self):
        self.registry.add(raws(2))
        with self.assertRaises(ValueError):
            self.registry.move_adjacent(0, "left")


class ClearTests(RegistryTestCase):
    def test_clear_releases_every_entry_once(self):
        self.registry.add(raws(4))
        refs = [e.media_ref for e in self.registry.entries]
        self.assertEqual(self.registry.clear(), 4)
        self.assertEqual(len(self.registry), 0)
        self.assertEqual(self.store.released, refs)
        self.assertEqual(self.store.live_count(), 0)
        self.assertEqual(self.registry.clear(), 0)
        self.assertEqual(len(self.store.released), 4)


class DenseIdPropertyTests(RegistryTestCase):
    def test_random_operation_sequences_keep_ids_dense(self):
        rng = random.Random(1234)
        registry = Registry(self.store, capacity=12)
        for step in range(400):
            op = rng.choice(["add", "remove", "move", "move"])
            if op == "add":
                registry.add(raws(rng.randint(0, 4), prefix=f"s{step}-"))
            elif op == "remove":
                registry.remove(rng.randint(0, len(registry) + 1))
            else:
                registry.move_adjacent(rng.randint(0, max(len(registry) - 1, 0)), rng.choice(["up", "down"]))
            self.assertEqual(registry.ids(), list(range(1, len(registry) + 1)))
            self.assertLessEqual(len(registry), 12)
        # Every entry that left the list was released, nothing else.
        self.assertEqual(self.store.live_count(), len(registry))


if __name__ == "__main__":
    unittest.main()
