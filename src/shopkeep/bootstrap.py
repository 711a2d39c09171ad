import os
from pathlib import Path

from shopkeep.application.services.curation_service import CurationService
from shopkeep.infrastructure.character_library import JsonCharacterLibrary
from shopkeep.infrastructure.item_library import JsonItemLibrary
from shopkeep.infrastructure.ollama_client import OllamaCuratorClient
from shopkeep.infrastructure.specials_store import JsonSpecialsStore


def _data_dir() -> Path:
    return Path(os.getenv("SHOPKEEP_DATA_DIR", "data"))


def _path_setting(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    return Path(value) if value else default


def items_dir() -> Path:
    return _path_setting("SHOPKEEP_ITEMS_DIR", _data_dir() / "magic_items")


def characters_dir() -> Path:
    return _path_setting("SHOPKEEP_CHARACTERS_DIR", _data_dir() / "characters")


def specials_path() -> Path:
    return _path_setting("SHOPKEEP_SPECIALS_PATH", _data_dir() / "session_specials.json")


def create_item_library() -> JsonItemLibrary:
    return JsonItemLibrary(items_dir())


def create_specials_store() -> JsonSpecialsStore:
    return JsonSpecialsStore(specials_path())


def create_curator_client() -> OllamaCuratorClient:
    base_url = os.getenv("SHOPKEEP_OLLAMA_URL", OllamaCuratorClient.BASE_URL)
    model = os.getenv("SHOPKEEP_CURATOR_MODEL", OllamaCuratorClient.DEFAULT_MODEL)
    timeout = float(os.getenv("SHOPKEEP_CURATOR_TIMEOUT_S", "300"))
    num_ctx = int(os.getenv("SHOPKEEP_CURATOR_NUM_CTX", "8192"))
    retries = int(os.getenv("SHOPKEEP_CURATOR_RETRIES", "0"))
    backoff_seconds = float(os.getenv("SHOPKEEP_CURATOR_BACKOFF_S", "0.5"))
    return OllamaCuratorClient(
        base_url=base_url,
        model=model,
        timeout=timeout,
        num_ctx=num_ctx or None,
        retries=retries,
        backoff_seconds=backoff_seconds,
    )


def create_curation_service(curator_model=None) -> CurationService:
    items_per_character = int(os.getenv("SHOPKEEP_ITEMS_PER_CHARACTER", "4"))
    return CurationService(
        item_library=create_item_library(),
        character_library=JsonCharacterLibrary(characters_dir()),
        curator_model=curator_model or create_curator_client(),
        specials_store=create_specials_store(),
        items_per_character=items_per_character,
    )
