"""Directory-scoped name resolver.

Directories can be declared as namespace roots. A module belongs to the
namespace of the deepest declared directory containing its build file, or
to the root namespace. Names only need to be unique within a namespace.

Lookup order for an unqualified name:
1. The depender's own namespace
2. Namespaces it imports, in declaration order
3. The root namespace

A name of the form ``//path/to/dir:name`` is fully qualified and is only
looked up in that namespace.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath

from .errors import DuplicateDefinitionError
from .errors import DuplicateRenameTargetError
from .errors import InvalidModuleNameError
from .errors import MissingDependencyError
from .errors import NameResolutionError
from .errors import NamespaceAlreadyDeclaredError
from .errors import NamespaceMismatchError
from .errors import RenameSourceMissingError
from .errors import SkippedDependencyError
from .errors import UndefinedDependencyError
from .errors import UnknownNamespaceImportError
from .models import ModuleGroup
from .models import ModuleInfo
from .models import SkippedModuleInfo
from .protocols import NameResolver
from .protocols import Namespace
from .protocols import NamespaceContext
from .simple import sorted_groups

logger = logging.getLogger(__name__)

ROOT_PATH = "."


def is_qualified_reference(name: str) -> bool:
    """True if ``name`` would be read as a ``//path:name`` reference."""
    return name.startswith("//") or ":" in name


def normalize_path(path: str) -> str:
    """Normalise a namespace directory to a relative POSIX path ("." for the root)."""
    path = path.removeprefix("//").strip()
    if not path:
        return ROOT_PATH
    normalized = posixpath.normpath(path).lstrip("/")
    return normalized or ROOT_PATH


@dataclass(frozen=True)
class PathNamespace(Namespace):
    """A namespace rooted at a directory."""

    path: str
    imports: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH

    @property
    def display_name(self) -> str:
        return "//" if self.is_root else f"//{self.path}"

    def qualify(self, name: str) -> str:
        return name if self.is_root else f"//{self.path}:{name}"


class NamespacedNameResolver(NameResolver[PathNamespace]):
    """Keeps one name table per declared namespace.

    Same threading contract as ``SimpleNameResolver``: a single writer
    during registration, concurrent readers afterwards.
    """

    def __init__(self) -> None:
        self._root = PathNamespace(ROOT_PATH)
        self._namespaces: dict[str, PathNamespace] = {ROOT_PATH: self._root}
        self._modules: dict[str, dict[str, ModuleGroup]] = {ROOT_PATH: {}}
        self._skipped_modules: dict[str, dict[str, list[SkippedModuleInfo]]] = {ROOT_PATH: {}}

    @property
    def root(self) -> PathNamespace:
        return self._root

    def declare_namespace(self, path: str, imports: Iterable[str] = ()) -> list[NameResolutionError]:
        """Declare ``path`` as a namespace root importing ``imports``.

        Modules registered afterwards from files under ``path`` are placed in
        the new namespace.
        """
        normalized = normalize_path(path)
        if normalized in self._namespaces:
            return [NamespaceAlreadyDeclaredError(normalized)]

        namespace = PathNamespace(normalized, tuple(normalize_path(i) for i in imports))
        self._namespaces[normalized] = namespace
        self._modules[normalized] = {}
        self._skipped_modules[normalized] = {}
        logger.debug(f"[names:namespace] declared {namespace.display_name} imports={list(namespace.imports)}")
        return []

    def namespaces(self) -> list[PathNamespace]:
        return [self._namespaces[path] for path in sorted(self._namespaces)]

    def check_imports(self) -> list[NameResolutionError]:
        """Report imports that name undeclared namespaces."""
        errors: list[NameResolutionError] = []
        for namespace in self.namespaces():
            for imported in namespace.imports:
                if imported not in self._namespaces:
                    errors.append(UnknownNamespaceImportError(namespace.display_name, f"//{imported}"))
        return errors

    def get_namespace(self, ctx: NamespaceContext) -> PathNamespace:
        directory = PurePosixPath(normalize_path(ctx.module_path)).parent
        for candidate in (directory, *directory.parents):
            namespace = self._namespaces.get(str(candidate))
            if namespace is not None:
                return namespace
        return self._root

    def new_module(
        self, ctx: NamespaceContext, group: ModuleGroup, module: ModuleInfo
    ) -> tuple[PathNamespace | None, list[NameResolutionError]]:
        if is_qualified_reference(group.name):
            return None, [InvalidModuleNameError(group.name, module.pos)]

        namespace = self.get_namespace(ctx)
        table = self._modules[namespace.path]
        existing = table.get(group.name)
        if existing is not None:
            where = None if namespace.is_root else namespace.display_name
            return None, [DuplicateDefinitionError(group.name, existing.first_module().pos, where)]

        table[group.name] = group
        logger.debug(
            f"[names:register] {group.name} in {namespace.display_name} ({ctx.module_path})",
            extra={"event": "names.register", "module_name": group.name, "namespace": namespace.display_name},
        )
        return namespace, []

    def new_skipped_module(self, ctx: NamespaceContext, name: str, skip_info: SkippedModuleInfo) -> None:
        if not name:
            return
        namespace = self.get_namespace(ctx)
        self._skipped_modules[namespace.path].setdefault(name, []).append(skip_info)
        logger.debug(
            f"[names:skip] {name} in {namespace.display_name} ({skip_info.reason})",
            extra={"event": "names.skip", "module_name": name, "namespace": namespace.display_name},
        )

    def module_from_name(
        self, module_name: str, namespace: PathNamespace | None
    ) -> tuple[ModuleGroup | None, bool]:
        for candidate, short_name in self._search(module_name, namespace):
            group = self._modules[candidate.path].get(short_name)
            if group is not None:
                return group, True
        return None, False

    def skipped_module_from_name(
        self, module_name: str, namespace: PathNamespace | None
    ) -> tuple[list[SkippedModuleInfo], bool]:
        found: list[SkippedModuleInfo] = []
        skipped = False
        for candidate, short_name in self._search(module_name, namespace):
            infos = self._skipped_modules[candidate.path].get(short_name)
            if infos is not None:
                found.extend(infos)
                skipped = True
        return found, skipped

    def missing_dependency_error(
        self,
        depender: str,
        depender_namespace: PathNamespace | None,
        dependency: str,
        guess: Sequence[str] = (),
    ) -> MissingDependencyError:
        skip_infos, skipped = self.skipped_module_from_name(dependency, depender_namespace)
        if skipped:
            return SkippedDependencyError(depender, dependency, skip_infos)

        searched = [candidate.display_name for candidate in self._visible(self._own(depender_namespace))]
        return UndefinedDependencyError(depender, dependency, guess, searched)

    def rename(self, old_name: str, new_name: str, namespace: PathNamespace | None) -> list[NameResolutionError]:
        own = self._own(namespace)
        table = self._modules[own.path]

        if is_qualified_reference(new_name):
            return [InvalidModuleNameError(new_name)]

        existing = table.get(new_name)
        if existing is not None:
            return [DuplicateRenameTargetError(old_name, new_name, existing.first_module().pos)]

        group = table.get(old_name)
        if group is None:
            return [RenameSourceMissingError(old_name, new_name)]

        table[new_name] = group
        del table[old_name]
        group.name = new_name
        logger.debug(
            f"[names:rename] {old_name} -> {new_name} in {own.display_name}",
            extra={"event": "names.rename", "module_name": new_name, "namespace": own.display_name},
        )
        return []

    def all_modules(self) -> list[ModuleGroup]:
        owners: dict[int, PathNamespace] = {}
        groups: list[ModuleGroup] = []
        for path, table in self._modules.items():
            for group in table.values():
                owners[id(group)] = self._namespaces[path]
                groups.append(group)
        return sorted_groups(groups, key=lambda group: owners[id(group)].qualify(group.name))

    def visible_names(self, namespace: PathNamespace | None) -> list[str]:
        """Short names for groups in visible namespaces, qualified names for the rest."""
        visible = self._visible(self._own(namespace))
        names: list[str] = []
        for path, table in self._modules.items():
            owner = self._namespaces[path]
            for name in table:
                names.append(name if owner in visible else owner.qualify(name))
        return sorted(names)

    def unique_name(self, ctx: NamespaceContext, name: str) -> str:
        return self.get_namespace(ctx).qualify(name)

    def _own(self, namespace: PathNamespace | None) -> PathNamespace:
        """Check that ``namespace`` was produced by this resolver (None means root)."""
        if namespace is None:
            return self._root
        if not isinstance(namespace, PathNamespace) or self._namespaces.get(namespace.path) is not namespace:
            raise NamespaceMismatchError(f"{namespace!r} was not created by this resolver")
        return namespace

    def _visible(self, namespace: PathNamespace) -> list[PathNamespace]:
        visible = [namespace]
        for imported in namespace.imports:
            candidate = self._namespaces.get(imported)
            if candidate is not None and candidate not in visible:
                visible.append(candidate)
        if self._root not in visible:
            visible.append(self._root)
        return visible

    def _search(self, module_name: str, namespace: PathNamespace | None) -> list[tuple[PathNamespace, str]]:
        """Return the (namespace, short name) pairs to try for ``module_name``, in order."""
        own = self._own(namespace)
        if module_name.startswith("//") and ":" in module_name:
            path, _, short_name = module_name.rpartition(":")
            target = self._namespaces.get(normalize_path(path))
            return [(target, short_name)] if target is not None else []
        return [(candidate, module_name) for candidate in self._visible(own)]

    def __repr__(self) -> str:
        return f"NamespacedNameResolver({len(self._namespaces)} namespaces)"
