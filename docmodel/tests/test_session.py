"""Tests for build sessions."""

import unittest

from docmodel.container import Namespace
from docmodel.method_record import MethodRecord
from docmodel.session import BuildSession


class TestBuildSession(unittest.TestCase):
    def test_records_share_session_sequence(self) -> None:
        session = BuildSession(fragment_seed="M000098")
        first = session.new_method(None, "a")
        second = session.new_method(None, "b")
        self.assertEqual(first.aref, "M000098")
        self.assertEqual(second.aref, "M000099")
        self.assertEqual(len(session), 2)

    def test_container_is_kept_alive_by_session(self) -> None:
        session = BuildSession()
        record = session.new_method(None, "each", container=Namespace("Foo"))
        self.assertEqual(record.container.full_name, "Foo")
        self.assertEqual(record.full_name, "Foo#each")

    def test_sorted_methods(self) -> None:
        session = BuildSession()
        session.new_method(None, "b")
        build = session.new_method(None, "build")
        build.singleton = True
        session.new_method(None, "a")
        self.assertEqual(
            [m.pretty_name for m in session.sorted_methods()],
            ["::build", "#a", "#b"],
        )

    def test_export_and_load(self) -> None:
        session = BuildSession()
        record = session.new_method(None, "each", container=Namespace("Foo"))
        record.comment = "# Loops."
        payload = session.export_method(record)

        fresh = BuildSession()
        loaded = fresh.load_method(payload)
        self.assertIsInstance(loaded, MethodRecord)
        self.assertEqual(loaded.full_name, "Foo#each")
        self.assertEqual(loaded.aref, "M000000")
        self.assertEqual(fresh.methods, [loaded])

    def test_reset(self) -> None:
        session = BuildSession()
        session.new_method(None, "a")
        session.new_method(None, "b")
        session.reset()
        self.assertEqual(len(session), 0)
        self.assertEqual(session.new_method(None, "c").aref, "M000000")


if __name__ == "__main__":
    unittest.main()
