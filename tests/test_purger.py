"""Tests for the retention purger."""

import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from rotation_logger.purger import purge

PREFIX = "app"


def _names(count):
    return [f"{PREFIX}_2024-01-{day:02d}_00-00-00.log" for day in range(1, count + 1)]


class TestPurge(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _touch(self, name):
        path = os.path.join(self.tmpdir, name)
        open(path, "w").close()
        return path

    def _remaining(self):
        return sorted(os.listdir(self.tmpdir))

    def test_deletes_oldest_beyond_keep_count(self):
        names = _names(5)
        for name in names:
            self._touch(name)
        self._touch("other.txt")

        deleted = purge(self.tmpdir, PREFIX, keep_count=2)

        self.assertEqual(deleted, names[:3])
        self.assertEqual(self._remaining(), sorted(names[3:] + ["other.txt"]))

    def test_nothing_deleted_when_within_limit(self):
        names = _names(3)
        for name in names:
            self._touch(name)

        self.assertEqual(purge(self.tmpdir, PREFIX, keep_count=3), [])
        self.assertEqual(purge(self.tmpdir, PREFIX, keep_count=10), [])
        self.assertEqual(self._remaining(), names)

    def test_retention_keeps_newest(self):
        for n in range(0, 6):
            for k in range(1, 5):
                with self.subTest(n=n, k=k):
                    for name in os.listdir(self.tmpdir):
                        os.remove(os.path.join(self.tmpdir, name))
                    names = _names(n)
                    for name in names:
                        self._touch(name)

                    deleted = purge(self.tmpdir, PREFIX, keep_count=k)

                    self.assertEqual(len(deleted), max(n - k, 0))
                    self.assertEqual(self._remaining(), names[len(names) - min(n, k):])

    def test_unreadable_directory_skips_purge(self):
        missing = os.path.join(self.tmpdir, "missing")
        with self.assertLogs("rotation_logger.purger", level="ERROR"):
            self.assertEqual(purge(missing, PREFIX, keep_count=1), [])

    def test_delete_failure_does_not_stop_others(self):
        names = _names(4)
        for name in names:
            self._touch(name)
        blocked = os.path.join(self.tmpdir, names[0])
        real_remove = os.remove

        def flaky_remove(path):
            if path == blocked:
                raise PermissionError(13, "Permission denied", path)
            real_remove(path)

        with patch("rotation_logger.purger.os.remove", side_effect=flaky_remove):
            with self.assertLogs("rotation_logger.purger", level="WARNING") as logs:
                deleted = purge(self.tmpdir, PREFIX, keep_count=1)

        self.assertEqual(deleted, names[1:3])
        self.assertTrue(any("Could not delete" in line for line in logs.output))
        self.assertEqual(self._remaining(), [names[0], names[3]])


if __name__ == "__main__":
    unittest.main()
