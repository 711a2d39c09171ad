import json
import random
import sys
import tempfile
from pathlib import Path
import unittest

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from shopkeep.application.services.curation_service import CurationService
from shopkeep.domain.errors import ExtractionError, GenerationError, LoadError
from shopkeep.domain.models.curation import ShopEntry
from shopkeep.domain.repositories import CuratorModel
from shopkeep.infrastructure.character_library import JsonCharacterLibrary
from shopkeep.infrastructure.item_library import JsonItemLibrary
from shopkeep.infrastructure.ollama_client import OllamaCuratorClient
from shopkeep.infrastructure.specials_store import JsonSpecialsStore


class _ScriptedCurator(CuratorModel):
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_message: str) -> str:
        self.calls.append((system_prompt, user_message))
        return self.reply


class _FailingCurator(CuratorModel):
    def complete(self, system_prompt: str, user_message: str) -> str:
        raise GenerationError("ollama curator call failed: timed out")


def _curator_reply(*selections) -> str:
    body = {
        "selections": [
            {"character": character, "items": [{"name": name, "reason": reason} for name, reason in picks]}
            for character, picks in selections
        ]
    }
    return "Here are my picks!\n```json\n" + json.dumps(body, indent=2) + "\n```\nEnjoy."


class CurationPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.items_dir = root / "magic_items"
        self.characters_dir = root / "characters"
        self.items_dir.mkdir()
        self.characters_dir.mkdir()
        self.specials_path = root / "session_specials.json"

        self._write_items(
            "wondrous_items",
            [
                {"name": "Cloak of Elvenkind", "rarity": "Uncommon", "attunement": "requires attunement",
                 "description": "Advantage on Stealth checks."},
            ],
        )
        self._write_character("tim_paladin", {"name": "Tim", "class_level": "Level 5 Paladin",
                                              "backstory_summary": "Knight of the dawn."})

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write_items(self, family: str, rows: list[dict]) -> None:
        (self.items_dir / f"{family}.json").write_text(json.dumps({"items": rows}), encoding="utf-8")

    def _write_character(self, stem: str, payload: dict) -> None:
        (self.characters_dir / f"{stem}.json").write_text(json.dumps(payload), encoding="utf-8")

    def _service(self, curator: CuratorModel, families=("wondrous_items",)) -> CurationService:
        return CurationService(
            item_library=JsonItemLibrary(self.items_dir, families=families),
            character_library=JsonCharacterLibrary(self.characters_dir),
            curator_model=curator,
            specials_store=JsonSpecialsStore(self.specials_path),
            rng_factory=lambda: random.Random(11),
        )

    def _seed_previous_artifact(self) -> str:
        JsonSpecialsStore(self.specials_path).replace(
            [ShopEntry(name="Bag of Holding", cost=300, rarity="Uncommon", description="last session")]
        )
        return self.specials_path.read_text(encoding="utf-8")

    def test_single_uncommon_item_end_to_end(self) -> None:
        curator = _ScriptedCurator(_curator_reply(("Tim", [("Cloak of Elvenkind", "Stealthy scouting")])))
        result = self._service(curator).refresh_session_specials()

        self.assertEqual(5, result.party_level)
        self.assertEqual(1, result.eligible_count)
        self.assertEqual([], result.warnings)

        stored = json.loads(self.specials_path.read_text(encoding="utf-8"))["items"]
        self.assertEqual(1, len(stored))
        entry = stored[0]
        self.assertEqual("Cloak of Elvenkind", entry["name"])
        self.assertEqual("specials", entry["category"])
        self.assertTrue(100 <= entry["cost"] <= 500)
        self.assertEqual("Uncommon, requires attunement", entry["rarity"])
        self.assertEqual(
            "Recommended for Tim: Stealthy scouting | Advantage on Stealth checks.",
            entry["description"],
        )

        system_prompt, user_message = curator.calls[0]
        self.assertIn("magic item curator", system_prompt)
        self.assertIn("- Cloak of Elvenkind (Uncommon)", user_message)

    def test_partial_failures_still_replace_artifact(self) -> None:
        self._write_items(
            "magic_weapons",
            [
                {"name": "Flame Tongue", "rarity": "Rare", "description": "Fire damage."},
                {"name": "Holy Avenger", "rarity": "Legendary", "description": "Too strong."},
            ],
        )
        self._write_character("eric_wizard", {"name": "Eric", "class_level": "Level 5 Wizard"})
        self._seed_previous_artifact()
        reply = _curator_reply(
            ("Tim", [("Flame Tongue (for smiting)", "fire"), ("Holy Avenger", "paladin"), ("Sword of Nonexistence", "?")]),
            ("Eric", [("cloak of elvenkind", "hide"), ("Flame Tongue", "duplicate")]),
        )
        result = self._service(_ScriptedCurator(reply), families=("magic_weapons", "wondrous_items")).refresh_session_specials()

        self.assertEqual(["Flame Tongue", "Cloak of Elvenkind"], [entry.name for entry in result.entries])
        self.assertEqual(
            [("hallucinated", "Holy Avenger"), ("hallucinated", "Sword of Nonexistence"), ("duplicate", "Flame Tongue")],
            [(warning.kind, warning.item) for warning in result.warnings],
        )
        stored = JsonSpecialsStore(self.specials_path).read_entries()
        self.assertEqual(result.entries, stored)
        self.assertTrue(500 <= stored[0].cost <= 5000)

    def test_generation_error_leaves_artifact_untouched(self) -> None:
        before = self._seed_previous_artifact()
        with self.assertRaises(GenerationError):
            self._service(_FailingCurator()).refresh_session_specials()
        self.assertEqual(before, self.specials_path.read_text(encoding="utf-8"))

    def test_malformed_selection_does_not_discard_other_picks(self) -> None:
        self._write_character("eric_wizard", {"name": "Eric", "class_level": "Level 5 Wizard"})
        reply = json.dumps(
            {
                "selections": [
                    {"character": "Tim", "items": [{"name": "Cloak of Elvenkind", "reason": "scouting"}]},
                    {"character": "Eric", "items": None},
                    {"items": [{"name": "Cloak of Elvenkind"}]},
                ]
            }
        )
        result = self._service(_ScriptedCurator(reply)).refresh_session_specials()

        self.assertEqual(["Cloak of Elvenkind"], [entry.name for entry in result.entries])
        stored = JsonSpecialsStore(self.specials_path).read_entries()
        self.assertEqual("Recommended for Tim: scouting | Advantage on Stealth checks.", stored[0].description)

    def test_extraction_error_keeps_raw_reply_and_artifact(self) -> None:
        before = self._seed_previous_artifact()
        with self.assertRaises(ExtractionError) as ctx:
            self._service(_ScriptedCurator("I cannot help with that.")).refresh_session_specials()
        self.assertEqual("I cannot help with that.", ctx.exception.raw_response)
        self.assertEqual(before, self.specials_path.read_text(encoding="utf-8"))

    def test_load_errors_abort_before_model_call(self) -> None:
        curator = _ScriptedCurator("{}")
        for path in self.characters_dir.glob("*.json"):
            path.unlink()
        with self.assertRaises(LoadError):
            self._service(curator).refresh_session_specials()
        with self.assertRaises(LoadError):
            self._service(curator, families=("magic_armor",)).refresh_session_specials()
        self.assertEqual([], curator.calls)
        self.assertFalse(self.specials_path.exists())

    def test_runs_through_ollama_http_client(self) -> None:
        reply = _curator_reply(("Tim", [("Cloak of Elvenkind", "quiet steps")]))

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": {"role": "assistant", "content": reply}})

        http_client = httpx.Client(base_url="http://ollama.test", transport=httpx.MockTransport(handler))
        curator = OllamaCuratorClient(http_client=http_client)
        try:
            result = self._service(curator).refresh_session_specials()
        finally:
            curator.close()

        self.assertEqual(["Cloak of Elvenkind"], [entry.name for entry in result.entries])


if __name__ == "__main__":
    unittest.main()
