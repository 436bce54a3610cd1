import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
FILAMENTS_FILE = DATA_DIR / "filaments.json"


@lru_cache(maxsize=1)
def _load() -> tuple:
    with FILAMENTS_FILE.open(encoding="utf-8") as fh:
        return tuple(json.load(fh))


def get_filaments() -> List[Dict[str, str]]:
    """Filament catalogue as ``{filament, hexColor, colorTag, profile}`` dicts."""
    return [dict(entry) for entry in _load()]
