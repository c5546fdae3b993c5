from pathlib import Path
from textwrap import dedent
from unittest.mock import Mock

import pytest

from unself.refactor import LibCSTRenameOracle
from unself.refactor.engine.transaction import FileSystemAdapter
from unself.spec import (
    AmbiguousBindingError,
    InvalidNameError,
    RenameConflictError,
    RenameError,
)


def _write(tmp_path: Path, source: str) -> Path:
    path = tmp_path / "mod.py"
    path.write_text(dedent(source), encoding="utf-8")
    return path


def _offset(path: Path, needle: bytes = b"self", nth: int = 0) -> int:
    data = path.read_bytes()
    pos = -1
    for _ in range(nth + 1):
        pos = data.index(needle, pos + 1)
    return pos


def test_rename_rewrites_every_reference_of_the_receiver(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            def draw(self, canvas):
                self.canvas = canvas
                return [self for _ in range(2)], (lambda: self)()

            def other(self):
                return self
        """,
    )

    plan = LibCSTRenameOracle().rename(path, _offset(path), "w")

    assert plan.old_name == "self"
    assert plan.new_name == "w"
    assert plan.occurrences == 4
    assert path.read_text() == dedent(
        """
        class Widget:
            def draw(w, canvas):
                w.canvas = canvas
                return [w for _ in range(2)], (lambda: w)()

            def other(self):
                return self
        """
    )


def test_prepare_does_not_touch_the_disk(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            def draw(self):
                return self
        """,
    )
    before = path.read_bytes()

    plan = LibCSTRenameOracle().prepare(path, _offset(path), "w")

    assert path.read_bytes() == before
    assert b"def draw(w):" in plan.content


def test_attribute_names_do_not_conflict(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            def w(self):
                return 1

            def draw(self):
                return self.w()
        """,
    )

    LibCSTRenameOracle().rename(path, _offset(path, nth=1), "w")

    assert "return w.w()" in path.read_text()
    assert "def w(self):" in path.read_text()


def test_bindings_in_sibling_methods_do_not_conflict(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            def a(self):
                w = 1
                return w

            def b(self):
                return self
        """,
    )

    LibCSTRenameOracle().rename(path, _offset(path, nth=1), "w")

    assert "def b(w):\n        return w" in path.read_text()
    assert "def a(self):" in path.read_text()


@pytest.mark.parametrize(
    "source",
    [
        # bound locally
        """
        class Widget:
            def draw(self):
                w = 1
                return self, w
        """,
        # another parameter
        """
        class Widget:
            def draw(self, w):
                return self, w
        """,
        # free reference to a module-level name
        """
        w = 3

        class Widget:
            def draw(self):
                return self, w
        """,
        # bound in a nested scope
        """
        class Widget:
            def draw(self):
                def helper(w):
                    return w
                return helper(self)
        """,
        # read in a nested scope
        """
        class Widget:
            def draw(self):
                return [w for w in self]
        """,
        # declared global
        """
        class Widget:
            def draw(self):
                global w
                w = 1
                return self
        """,
        # declared nonlocal
        """
        def make():
            w = 0

            class Widget:
                def draw(self):
                    nonlocal w
                    w = 1
                    return self

            return Widget
        """,
        # declared global in a nested function
        """
        class Widget:
            def draw(self):
                def reset():
                    global w
                    w = None
                reset()
                return self
        """,
    ],
)
def test_conflicts_are_reported_and_leave_the_file_untouched(tmp_path, source):
    path = _write(tmp_path, source)
    before = path.read_bytes()

    with pytest.raises(RenameConflictError) as excinfo:
        LibCSTRenameOracle().rename(path, _offset(path), "w")

    assert excinfo.value.name == "w"
    assert path.read_bytes() == before


def test_builtin_references_conflict(tmp_path):
    path = _write(
        tmp_path,
        """
        class Record:
            def key(self):
                return id(self)
        """,
    )

    with pytest.raises(RenameConflictError):
        LibCSTRenameOracle().rename(path, _offset(path), "id")


def test_renaming_to_the_same_name_is_a_conflict(tmp_path):
    path = _write(
        tmp_path,
        """
        class THIS:
            def go(this):
                return this
        """,
    )

    with pytest.raises(RenameConflictError):
        LibCSTRenameOracle().prepare(path, _offset(path, b"this"), "this")


@pytest.mark.parametrize("bad_name", ["is", "class", "1x", "a-b", ""])
def test_invalid_names_are_rejected(tmp_path, bad_name):
    path = _write(
        tmp_path,
        """
        class Is:
            def go(self):
                return self
        """,
    )

    with pytest.raises(InvalidNameError):
        LibCSTRenameOracle().prepare(path, _offset(path), bad_name)


def test_rebound_receiver_is_ambiguous(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            def draw(self):
                self = make()
                return self
        """,
    )

    with pytest.raises(AmbiguousBindingError):
        LibCSTRenameOracle().prepare(path, _offset(path), "w")


def test_non_local_binding_is_rejected(tmp_path):
    path = _write(
        tmp_path,
        """
        class Widget:
            pass
        """,
    )

    with pytest.raises(AmbiguousBindingError):
        LibCSTRenameOracle().prepare(path, _offset(path, b"Widget"), "w")


def test_offset_without_identifier_is_an_error(tmp_path):
    path = _write(tmp_path, "\n\nx = 1\n")

    with pytest.raises(RenameError) as excinfo:
        LibCSTRenameOracle().prepare(path, 0, "w")

    assert not isinstance(excinfo.value, RenameConflictError)


def test_io_failures_surface_as_rename_errors():
    fs = Mock(spec=FileSystemAdapter)
    fs.read_bytes.return_value = b"class Widget:\n    def draw(self):\n        return self\n"
    fs.write_bytes.side_effect = OSError("disk full")
    oracle = LibCSTRenameOracle(fs=fs)

    with pytest.raises(RenameError) as excinfo:
        oracle.rename(Path("/virtual/mod.py"), 27, "w")

    assert "disk full" in str(excinfo.value)
    fs.write_bytes.assert_called_once()


def test_unreadable_file_is_a_rename_error(tmp_path):
    with pytest.raises(RenameError):
        LibCSTRenameOracle().prepare(tmp_path / "missing.py", 0, "w")
