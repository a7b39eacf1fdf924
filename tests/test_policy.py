"""Tests for selection precedence and target resolution."""

from __future__ import annotations

import pytest

from depclean.exceptions import UsageError
from depclean.models import DependencySpec, SelectionMode
from depclean.policy import Selection, resolve

SNAPSHOT = [DependencySpec("a"), DependencySpec("b", fetchable=False, path="../b")]


class TestSelection:
    def test_nothing_selected_raises(self):
        with pytest.raises(UsageError, match="--all option will clean all dependencies"):
            Selection.from_options()

    def test_custom_usage_message(self):
        with pytest.raises(UsageError, match="nothing to do"):
            Selection.from_options(message="nothing to do")

    def test_explicit_names(self):
        selection = Selection.from_options(["plug", "jason", "plug"])
        assert selection.mode is SelectionMode.EXPLICIT
        assert selection.names == ("plug", "jason")
        assert not selection.needs_discovery

    def test_explicit_wins_over_all_and_unused(self):
        selection = Selection.from_options(["plug"], all_=True, unused=True)
        assert selection.mode is SelectionMode.EXPLICIT

    def test_all_wins_over_unused(self):
        selection = Selection.from_options(all_=True, unused=True)
        assert selection.mode is SelectionMode.ALL
        assert selection.needs_discovery

    def test_unused(self):
        assert Selection.from_options(unused=True).mode is SelectionMode.UNUSED

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "../deps", "/etc"])
    def test_rejects_names_outside_own_directory(self, name):
        with pytest.raises(UsageError, match="invalid dependency name"):
            Selection.from_options([name], all_=True)

    def test_accepts_plain_names(self):
        assert Selection.from_options(["plug_crypto", "a.b", "x-1"]).names == (
            "plug_crypto",
            "a.b",
            "x-1",
        )


class TestResolve:
    def test_explicit_is_verbatim(self):
        # No existence check: absent directories become warnings later.
        selection = Selection.from_options(["zzz", "a"])
        assert resolve(selection, {"a", "c"}, SNAPSHOT) == ("zzz", "a")

    def test_all_is_discovered(self):
        selection = Selection.from_options(all_=True)
        assert resolve(selection, {"c", "a", "b"}, SNAPSHOT) == ("a", "b", "c")

    def test_unused_drops_converged_names(self):
        selection = Selection.from_options(unused=True)
        assert resolve(selection, {"a", "b", "c", "d"}, SNAPSHOT) == ("c", "d")

    def test_unused_with_nothing_stale(self):
        selection = Selection.from_options(unused=True)
        assert resolve(selection, {"a", "b"}, SNAPSHOT) == ()

    def test_result_is_immutable(self):
        targets = resolve(Selection.from_options(all_=True), {"a"}, SNAPSHOT)
        assert isinstance(targets, tuple)
