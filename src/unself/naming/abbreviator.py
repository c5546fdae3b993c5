from types import MappingProxyType
from typing import Mapping, Optional

# Names whose casing skeleton makes a poor receiver name.
DEFAULT_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "Spotlight": "sl",
        "GitHub": "gh",
        "GitLab": "gl",
        "JavaScript": "js",
        "TypeScript": "ts",
        "HTTPServer": "srv",
        "HTTPRequest": "req",
        "HTTPResponse": "resp",
        "JSONEncoder": "enc",
        "JSONDecoder": "dec",
        "XMLParser": "xp",
        "URLPattern": "pat",
        "SQLQuery": "q",
        "UUIDField": "uf",
    }
)


class Abbreviator:
    """
    Derives a short, lowercase receiver name from a type name.

    Rules, first match wins:

    1. the override table, returned verbatim;
    2. an all-uppercase name (an acronym) is lowercased whole: ``ID -> id``;
    3. an all-lowercase name keeps its first three characters, or only the
       first one when shorter than three: ``user -> use``, ``db -> d``;
    4. anything else keeps its first character plus every later character
       that is not a lowercase letter, lowercased, with a trailing plural
       ``s`` carried over: ``fooBarBaz -> fbb``, ``Requests -> rs``.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        table = dict(DEFAULT_OVERRIDES)
        if overrides:
            table.update(overrides)
        self._overrides: Mapping[str, str] = MappingProxyType(table)

    @property
    def overrides(self) -> Mapping[str, str]:
        return self._overrides

    def __call__(self, type_name: str) -> str:
        if not type_name:
            raise ValueError("cannot abbreviate an empty type name")

        override = self._overrides.get(type_name)
        if override is not None:
            return override

        if type_name.isupper():
            return type_name.lower()

        if type_name.islower():
            return type_name[:1] if len(type_name) < 3 else type_name[:3]

        return self._initials(type_name)

    @staticmethod
    def _initials(type_name: str) -> str:
        plural = len(type_name) > 1 and type_name.endswith("s")
        stem = type_name[:-1] if plural else type_name

        kept = [stem[0]]
        kept.extend(ch for ch in stem[1:] if not ch.islower())
        short = "".join(kept).lower()
        return short + "s" if plural else short


_default = Abbreviator()


def abbreviate(type_name: str) -> str:
    return _default(type_name)
