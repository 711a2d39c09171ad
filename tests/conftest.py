import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def reset_http_circuits():
    from shopkeep.infrastructure.resilient_http import reset_circuit_breakers

    reset_circuit_breakers()
    yield
    reset_circuit_breakers()


@pytest.fixture(autouse=True)
def isolated_shopkeep_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SHOPKEEP_DATA_DIR",
        "SHOPKEEP_ITEMS_DIR",
        "SHOPKEEP_CHARACTERS_DIR",
        "SHOPKEEP_SPECIALS_PATH",
        "SHOPKEEP_OLLAMA_URL",
    ):
        monkeypatch.delenv(name, raising=False)
