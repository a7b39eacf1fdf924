"""Dependency tree snapshot — converge manifest + lock file into specs."""

from __future__ import annotations

from collections import deque
from typing import Any, Protocol, runtime_checkable

import structlog

from depclean.exceptions import ConfigError
from depclean.lockfile import read_lock
from depclean.models import DependencySpec, ProjectConfig, Scope
from depclean.project import read_manifest

log = structlog.get_logger("depclean.snapshot")


@runtime_checkable
class Converger(Protocol):
    """Anything that can produce the converged dependency list for a scope."""

    def converge(self, scope: Scope) -> list[DependencySpec]: ...


def _as_names(value: Any, field_name: str, dep: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"dependency {dep!r}: {field_name} must be a string or list of strings")


def parse_dependency(name: str, spec: Any) -> DependencySpec:
    """Turn one ``[dependencies]`` entry into a :class:`DependencySpec`.

    Accepted forms::

        plug = "~> 1.14"
        my_lib = { path = "../my_lib" }
        credo = { version = "1.7", only = ["dev", "test"] }
    """
    if isinstance(spec, str):
        return DependencySpec(app=name, version=spec)
    if not isinstance(spec, dict):
        raise ConfigError(f"dependency {name!r} must be a version string or a table")

    path = spec.get("path")
    if path is not None and not isinstance(path, str):
        raise ConfigError(f"dependency {name!r}: path must be a string")
    version = spec.get("version")
    if version is not None and not isinstance(version, str):
        raise ConfigError(f"dependency {name!r}: version must be a string")

    return DependencySpec(
        app=name,
        fetchable=path is None,
        only=_as_names(spec.get("only"), "only", name),
        targets=_as_names(spec.get("targets"), "targets", name),
        path=path,
        version=version,
    )


def _in_scope(dep: DependencySpec, scope: Scope) -> bool:
    if scope.env is not None and dep.only and scope.env not in dep.only:
        return False
    if scope.target is not None and dep.targets and scope.target not in dep.targets:
        return False
    return True


class ManifestConverger:
    """Converge the manifest's dependencies with the lock file.

    Top-level entries come from ``[dependencies]`` and are filtered by the
    scope. Transitive entries are followed through the lock file's
    ``packages.<name>.dependencies`` lists and are always fetchable.
    """

    def __init__(self, config: ProjectConfig) -> None:
        self._config = config

    def converge(self, scope: Scope) -> list[DependencySpec]:
        data = read_manifest(self._config.manifest)
        table = data.get("dependencies", {})
        if not isinstance(table, dict):
            raise ConfigError("[dependencies] must be a table")

        top_level = [parse_dependency(name, spec) for name, spec in table.items()]
        converged: dict[str, DependencySpec] = {
            dep.app: dep for dep in top_level if _in_scope(dep, scope)
        }

        packages = read_lock(self._config.lockfile)
        queue = deque(converged)
        while queue:
            name = queue.popleft()
            children = packages.get(name, {}).get("dependencies", [])
            for child in children:
                if child not in converged:
                    converged[child] = DependencySpec(
                        app=child, version=packages.get(child, {}).get("version")
                    )
                    queue.append(child)

        log.debug(
            "snapshot.converged",
            env=scope.env,
            target=scope.target,
            count=len(converged),
        )
        return [converged[name] for name in sorted(converged)]
