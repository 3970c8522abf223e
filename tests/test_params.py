import json
import os
import tempfile
import unittest
from pathlib import Path

from media_recommendations.errors import LoadError
from media_recommendations.utils.params import load_parameters


class TestLoadParameters(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = self.tmp / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_loads_events_in_order(self):
        events = [{"eventType": "view-item", "userPseudoId": f"user-{i}"} for i in range(5)]
        path = self._write("events.json", json.dumps(events))

        loaded = load_parameters(path)

        self.assertEqual(loaded, events)

    def test_relative_path_is_resolved(self):
        self._write("events.json", "[{}, {}]")
        cwd = os.getcwd()
        os.chdir(self.tmp)
        try:
            loaded = load_parameters("events.json")
        finally:
            os.chdir(cwd)
        self.assertEqual(len(loaded), 2)

    def test_empty_array(self):
        path = self._write("events.json", "[]")
        self.assertEqual(load_parameters(path), [])

    def test_missing_file(self):
        with self.assertRaises(LoadError) as ctx:
            load_parameters(self.tmp / "missing.json")
        self.assertIsInstance(ctx.exception.__cause__, OSError)
        self.assertEqual(ctx.exception.stage, "load_parameters")

    def test_directory_is_unreadable(self):
        with self.assertRaises(LoadError):
            load_parameters(self.tmp)

    def test_malformed_json(self):
        path = self._write("events.json", '[{"eventType": "view-item"},')
        with self.assertRaises(LoadError) as ctx:
            load_parameters(path)
        self.assertIsInstance(ctx.exception.__cause__, json.JSONDecodeError)

    def test_non_standard_constants_are_rejected(self):
        for content in ("[NaN]", '[{"score": Infinity}]', "[-Infinity]"):
            with self.subTest(content=content):
                path = self._write("events.json", content)
                with self.assertRaises(LoadError):
                    load_parameters(path)

    def test_deeply_nested_array(self):
        path = self._write("events.json", "[" * 100000 + "]" * 100000)
        with self.assertRaises(LoadError) as ctx:
            load_parameters(path)
        self.assertIsInstance(ctx.exception.__cause__, RecursionError)

    def test_top_level_object_is_rejected(self):
        path = self._write("events.json", '{"eventType": "view-item"}')
        with self.assertRaises(LoadError):
            load_parameters(path)


if __name__ == "__main__":
    unittest.main()
