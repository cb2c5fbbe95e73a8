import os
from functools import lru_cache
from typing import Any, Dict

import yaml

CATALOG_PATH = os.path.join(os.path.dirname(__file__), "catalog.yaml")

@lru_cache(maxsize=1)
def load_catalog() -> Dict[str, Any]:
    with open(CATALOG_PATH, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    # YAML keys come back as ints already; normalise in case someone quotes them
    data["tiers"] = {int(k): v for k, v in data["tiers"].items()}
    return data
