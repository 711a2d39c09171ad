import os
import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from shopkeep import bootstrap


class BootstrapTests(unittest.TestCase):
    def test_paths_default_under_data_dir(self) -> None:
        with mock.patch.dict(os.environ, {"SHOPKEEP_DATA_DIR": "/srv/shop"}, clear=False):
            self.assertEqual(Path("/srv/shop/magic_items"), bootstrap.items_dir())
            self.assertEqual(Path("/srv/shop/characters"), bootstrap.characters_dir())
            self.assertEqual(Path("/srv/shop/session_specials.json"), bootstrap.specials_path())

    def test_explicit_paths_override_data_dir(self) -> None:
        env = {"SHOPKEEP_DATA_DIR": "/srv/shop", "SHOPKEEP_SPECIALS_PATH": "/tmp/specials.json"}
        with mock.patch.dict(os.environ, env, clear=False):
            self.assertEqual(Path("/tmp/specials.json"), bootstrap.specials_path())

    def test_curation_service_reads_curator_settings(self) -> None:
        env = {
            "SHOPKEEP_CURATOR_MODEL": "mistral:7b",
            "SHOPKEEP_CURATOR_NUM_CTX": "0",
            "SHOPKEEP_ITEMS_PER_CHARACTER": "3",
        }
        with mock.patch.dict(os.environ, env, clear=False):
            service = bootstrap.create_curation_service()
        try:
            self.assertEqual(3, service.items_per_character)
            self.assertEqual("mistral:7b", service.curator_model.model)
            self.assertEqual({}, service.curator_model._options())
        finally:
            service.curator_model.close()


if __name__ == "__main__":
    unittest.main()
