import json
import logging
from pathlib import Path

from shopkeep.domain.errors import LoadError
from shopkeep.domain.models.character_profile import CharacterProfile
from shopkeep.domain.repositories import CharacterLibrary


class JsonCharacterLibrary(CharacterLibrary):
    """One JSON profile per file; every call returns a fresh snapshot."""

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)
        self._logger = logging.getLogger(__name__)

    def _load_file(self, path: Path) -> CharacterProfile:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise LoadError(f"failed to read character '{path.stem}': {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LoadError(f"failed to parse character '{path.stem}': {exc}") from exc
        if not isinstance(payload, dict):
            raise LoadError(f"character '{path.stem}' is not a JSON object")
        try:
            return CharacterProfile.from_payload(payload)
        except ValueError as exc:
            raise LoadError(f"character '{path.stem}': {exc}") from exc

    def load_all(self) -> tuple[CharacterProfile, ...]:
        if not self.root_dir.is_dir():
            raise LoadError(f"characters directory not found: {self.root_dir}")
        paths = sorted(path for path in self.root_dir.glob("*.json") if path.is_file())
        profiles = tuple(self._load_file(path) for path in paths)
        self._logger.info("Loaded character profiles", extra={"count": len(profiles)})
        return profiles

    def find_by_handle(self, handle: str) -> CharacterProfile | None:
        wanted = str(handle or "").strip().lower()
        if not wanted:
            return None
        for profile in self.load_all():
            if (profile.discord_handle or "").lower() == wanted:
                return profile
        return None
