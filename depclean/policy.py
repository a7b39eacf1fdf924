"""Policy resolver — turn the user's selection into the set of targets."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass

from depclean.exceptions import UsageError
from depclean.models import DependencySpec, SelectionMode

USAGE_MESSAGE = (
    '"depclean clean" expects dependencies as arguments or '
    "an option indicating which dependencies to clean. "
    "The --all option will clean all dependencies while "
    "the --unused option cleans unused dependencies"
)


def check_name(name: str) -> str:
    """Reject names that would resolve outside their own dependency directory."""
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    if name in ("", ".", "..") or any(sep in name for sep in separators):
        raise UsageError(f"invalid dependency name {name!r}")
    return name


@dataclass(frozen=True)
class Selection:
    mode: SelectionMode
    names: tuple[str, ...] = ()

    @classmethod
    def from_options(
        cls,
        names: Iterable[str] = (),
        all_: bool = False,
        unused: bool = False,
        message: str = USAGE_MESSAGE,
    ) -> Selection:
        """Pick exactly one selection mode.

        Explicit names win over ``--all``, which wins over ``--unused``.
        Raises UsageError when nothing was selected or a name is not a
        plain directory name.
        """
        names = tuple(dict.fromkeys(check_name(name) for name in names))
        if names:
            return cls(SelectionMode.EXPLICIT, names)
        if all_:
            return cls(SelectionMode.ALL)
        if unused:
            return cls(SelectionMode.UNUSED)
        raise UsageError(message)

    @property
    def needs_discovery(self) -> bool:
        return self.mode is not SelectionMode.EXPLICIT


def resolve(
    selection: Selection,
    discovered: Iterable[str],
    snapshot: Iterable[DependencySpec],
) -> tuple[str, ...]:
    """Compute the immutable cleanup target set for this run."""
    if selection.mode is SelectionMode.EXPLICIT:
        return selection.names
    if selection.mode is SelectionMode.ALL:
        return tuple(sorted(set(discovered)))

    loaded = {dep.app for dep in snapshot}
    return tuple(sorted(set(discovered) - loaded))
