import os
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from .loader import Loader
from .pointer import SemanticPointer


class Needle:
    """
    Resolves semantic pointers to message templates.

    Catalogs live under ``<root>/needle/<lang>/``. Roots are searched in
    order and later roots override earlier ones.
    """

    def __init__(self, roots: Optional[List[Path]] = None, default_lang: str = "en"):
        self.default_lang = default_lang
        self.roots: List[Path] = list(roots or [])
        self._loader = Loader()
        self._registry: Dict[str, Dict[str, str]] = {}
        self._loaded_langs: Set[str] = set()

    def _ensure_lang_loaded(self, lang: str) -> None:
        if lang in self._loaded_langs:
            return

        merged: Dict[str, str] = {}
        for root in self.roots:
            merged.update(self._loader.load_directory(root / "needle" / lang))

        self._registry[lang] = merged
        self._loaded_langs.add(lang)

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Lookup order: target language, default language, then the key itself.
        """
        key = str(pointer)
        target_lang = lang or os.getenv("UNSELF_LANG", self.default_lang)

        self._ensure_lang_loaded(target_lang)
        value = self._registry[target_lang].get(key)
        if value is not None:
            return value

        if target_lang != self.default_lang:
            self._ensure_lang_loaded(self.default_lang)
            value = self._registry[self.default_lang].get(key)
            if value is not None:
                return value

        return key
