from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import json
from pathlib import Path

from venturesim.projection.parameters import BusinessModelProfile, profile_from_dict

DEFAULT_CATALOG_PATH = Path(__file__).with_name("business_models.json")


@dataclass
class Catalog:
    profiles: Dict[str, BusinessModelProfile]  # lower-cased title -> profile

    @staticmethod
    def from_json_path(path: str | Path) -> "Catalog":
        data = json.loads(Path(path).read_text())
        profiles = [profile_from_dict(m) for m in data.get("models", [])]
        return Catalog(profiles={p.title.lower(): p for p in profiles if p.title})

    def get(self, title: Any) -> Optional[BusinessModelProfile]:
        if not title:
            return None
        return self.profiles.get(str(title).strip().lower())

    def titles(self) -> List[str]:
        return [p.title for p in self.profiles.values()]

    def all(self) -> List[BusinessModelProfile]:
        return list(self.profiles.values())


def load_catalog(path: str | Path | None = None) -> Catalog:
    return Catalog.from_json_path(path or DEFAULT_CATALOG_PATH)
