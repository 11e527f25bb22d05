"""Default name resolver: one global namespace, exact-match lookup."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import DuplicateDefinitionError
from .errors import DuplicateRenameTargetError
from .errors import MissingDependencyError
from .errors import NameResolutionError
from .errors import RenameSourceMissingError
from .errors import SkippedDependencyError
from .errors import StorageInvariantError
from .errors import UndefinedDependencyError
from .models import ModuleGroup
from .models import ModuleInfo
from .models import SkippedModuleInfo
from .protocols import NameResolver
from .protocols import Namespace
from .protocols import NamespaceContext

logger = logging.getLogger(__name__)


def sorted_groups(groups: list[ModuleGroup], key=lambda group: group.name) -> list[ModuleGroup]:
    """Sort groups by ``key``, failing loudly if two share the same key.

    Raises:
        StorageInvariantError: Two groups produced the same key
    """
    ordered = sorted(groups, key=key)
    for previous, current in zip(ordered, ordered[1:]):
        if key(previous) == key(current):
            raise StorageInvariantError(key(current))
    return ordered


class SimpleNameResolver(NameResolver[Namespace]):
    """Stores every module in a single map keyed by name.

    Never produces a namespace: every namespace argument is ignored and
    ``get_namespace`` returns None.
    """

    def __init__(self) -> None:
        self._modules: dict[str, ModuleGroup] = {}
        self._skipped_modules: dict[str, list[SkippedModuleInfo]] = {}

    def new_module(
        self, ctx: NamespaceContext, group: ModuleGroup, module: ModuleInfo
    ) -> tuple[Namespace | None, list[NameResolutionError]]:
        name = group.name
        existing = self._modules.get(name)
        if existing is not None:
            logger.debug(f"[names:register] {name} rejected, already defined at {existing.first_module().pos}")
            return None, [DuplicateDefinitionError(name, existing.first_module().pos)]

        self._modules[name] = group
        logger.debug(
            f"[names:register] {name} ({ctx.module_path})",
            extra={"event": "names.register", "module_name": name},
        )
        return None, []

    def new_skipped_module(self, ctx: NamespaceContext, name: str, skip_info: SkippedModuleInfo) -> None:
        if not name:
            return
        self._skipped_modules.setdefault(name, []).append(skip_info)
        logger.debug(
            f"[names:skip] {name} ({skip_info.filename}: {skip_info.reason})",
            extra={"event": "names.skip", "module_name": name},
        )

    def module_from_name(self, module_name: str, namespace: Namespace | None) -> tuple[ModuleGroup | None, bool]:
        group = self._modules.get(module_name)
        return group, group is not None

    def skipped_module_from_name(
        self, module_name: str, namespace: Namespace | None
    ) -> tuple[list[SkippedModuleInfo], bool]:
        if module_name not in self._skipped_modules:
            return [], False
        return list(self._skipped_modules[module_name]), True

    def rename(self, old_name: str, new_name: str, namespace: Namespace | None) -> list[NameResolutionError]:
        existing = self._modules.get(new_name)
        if existing is not None:
            return [DuplicateRenameTargetError(old_name, new_name, existing.first_module().pos)]

        group = self._modules.get(old_name)
        if group is None:
            return [RenameSourceMissingError(old_name, new_name)]

        self._modules[new_name] = group
        del self._modules[old_name]
        group.name = new_name
        logger.debug(
            f"[names:rename] {old_name} -> {new_name}",
            extra={"event": "names.rename", "module_name": new_name},
        )
        return []

    def all_modules(self) -> list[ModuleGroup]:
        # Registration rejects duplicates, so a clash here means the table itself is broken
        return sorted_groups(list(self._modules.values()))

    def missing_dependency_error(
        self,
        depender: str,
        depender_namespace: Namespace | None,
        dependency: str,
        guess: Sequence[str] = (),
    ) -> MissingDependencyError:
        skip_infos, skipped = self.skipped_module_from_name(dependency, depender_namespace)
        if skipped:
            return SkippedDependencyError(depender, dependency, skip_infos)
        return UndefinedDependencyError(depender, dependency, guess)

    def get_namespace(self, ctx: NamespaceContext) -> Namespace | None:
        return None

    def unique_name(self, ctx: NamespaceContext, name: str) -> str:
        return name

    def __repr__(self) -> str:
        return f"SimpleNameResolver({len(self._modules)} modules)"
