from contextlib import contextmanager
from typing import Any, Dict, Iterator

import unself.common


class MockNeedle:
    """
    Replaces the global message catalog lookup with a fixed template table.
    """

    def __init__(self, templates: Dict[str, str]):
        self._templates = templates

    def _mock_get(self, key: Any, lang: Any = None) -> str:
        key_str = str(key)
        return self._templates.get(key_str, key_str)

    @contextmanager
    def patch(self, monkeypatch: Any) -> Iterator[None]:
        # MessageBus resolves templates through the shared runtime instance.
        monkeypatch.setattr(unself.common.needle, "get", self._mock_get)
        yield
