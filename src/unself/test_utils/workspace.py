from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List, Tuple

import tomli_w


class WorkspaceFactory:
    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Tuple[str, str]] = []
        self._pyproject_data: Dict[str, Any] = {}

    def with_config(self, unself_config: Dict[str, Any]) -> "WorkspaceFactory":
        tool = self._pyproject_data.setdefault("tool", {})
        tool["unself"] = unself_config
        return self

    def with_project_name(self, name: str) -> "WorkspaceFactory":
        project = self._pyproject_data.setdefault("project", {})
        project["name"] = name
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append((path, dedent(content)))
        return self

    def build(self) -> Path:
        if self._pyproject_data:
            pyproject_path = self.root_path / "pyproject.toml"
            with pyproject_path.open("wb") as f:
                tomli_w.dump(self._pyproject_data, f)

        for rel_path, content in self._files_to_create:
            output_path = self.root_path / rel_path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")

        return self.root_path

    def snapshot(self) -> Dict[str, bytes]:
        """Raw bytes of every file under the root, keyed by relative path."""
        return {
            p.relative_to(self.root_path).as_posix(): p.read_bytes()
            for p in sorted(self.root_path.rglob("*"))
            if p.is_file()
        }
