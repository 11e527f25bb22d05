"""Build-graph construction driver.

Feeds a manifest through a name resolver the way a build-file parser
would: every registration and rename goes through ``GraphBuilder.build``,
which is the single writer for its resolver. Dependency edges are resolved
only after registration has finished.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from .manifest import Manifest
from .name_resolution import MissingDependencyError
from .name_resolution import ModuleGroup
from .name_resolution import NamespacedNameResolver
from .name_resolution import NameResolutionError
from .name_resolution import NameResolver
from .name_resolution import NamespaceContext
from .name_resolution import names_like
from .name_resolution.suggestions import DEFAULT_CUTOFF
from .name_resolution.suggestions import DEFAULT_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class BuildGraphResult:
    """Outcome of feeding a manifest through a resolver.

    Attributes:
        groups: All registered groups in the resolver's deterministic order
        edges: Unique name of each group -> unique names of its resolved deps
        errors: Every recoverable error, in the order it was found
    """

    groups: list[ModuleGroup] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)
    errors: list[NameResolutionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class GraphBuilder:
    """Registers manifest modules with a resolver and resolves their dependencies."""

    def __init__(
        self,
        resolver: NameResolver,
        suggestion_limit: int = DEFAULT_LIMIT,
        suggestion_cutoff: float = DEFAULT_CUTOFF,
    ):
        self.resolver = resolver
        self.suggestion_limit = suggestion_limit
        self.suggestion_cutoff = suggestion_cutoff

    def build(self, manifest: Manifest) -> BuildGraphResult:
        result = BuildGraphResult()

        self._declare_namespaces(manifest, result.errors)

        registered: list[tuple[ModuleGroup, list[str]]] = []
        for definition in manifest.modules:
            modules = definition.module_infos()
            group = ModuleGroup(definition.name, modules)
            namespace, errors = self.resolver.new_module(NamespaceContext.from_module(modules[0]), group, modules[0])
            if errors:
                result.errors.extend(errors)
                continue
            group.namespace = namespace
            registered.append((group, definition.deps))

        for skipped in manifest.skipped:
            self.resolver.new_skipped_module(
                NamespaceContext.from_filename(skipped.file), skipped.name, skipped.skip_info()
            )

        for rename in manifest.renames:
            namespace = self.resolver.get_namespace(NamespaceContext.from_filename(rename.file)) if rename.file else None
            result.errors.extend(self.resolver.rename(rename.old, rename.new, namespace))

        result.groups = self.resolver.all_modules()

        for group, deps in registered:
            targets: list[str] = []
            for dep in deps:
                target, found = self.resolver.module_from_name(dep, group.namespace)
                if found:
                    targets.append(self.unique_name(target))
                    continue
                guess = self._suggest(dep, group.namespace)
                result.errors.append(self.resolver.missing_dependency_error(group.name, group.namespace, dep, guess))
            result.edges[self.unique_name(group)] = targets

        if result.errors:
            logger.info(f"Build graph has {len(result.errors)} name resolution error(s)")
        logger.debug(f"Resolved {len(result.groups)} module groups, {sum(map(len, result.edges.values()))} edges")
        return result

    def lookup(self, name: str, from_file: str) -> tuple[ModuleGroup | None, MissingDependencyError | None]:
        """Resolve ``name`` as if it were a dependency written in ``from_file``.

        Returns:
            Tuple of (group, None) when found, otherwise (None, diagnostic)
        """
        namespace = self.resolver.get_namespace(NamespaceContext.from_filename(from_file))
        group, found = self.resolver.module_from_name(name, namespace)
        if found:
            return group, None
        guess = self._suggest(name, namespace)
        return None, self.resolver.missing_dependency_error(from_file, namespace, name, guess)

    def unique_name(self, group: ModuleGroup) -> str:
        return self.resolver.unique_name(NamespaceContext.from_module(group.first_module()), group.name)

    def _declare_namespaces(self, manifest: Manifest, errors: list[NameResolutionError]) -> None:
        if not manifest.namespaces:
            return
        if not isinstance(self.resolver, NamespacedNameResolver):
            logger.warning(f"Ignoring {len(manifest.namespaces)} namespace declaration(s): {self.resolver!r} is flat")
            return
        for declaration in manifest.namespaces:
            errors.extend(self.resolver.declare_namespace(declaration.path, declaration.imports))
        errors.extend(self.resolver.check_imports())

    def _suggest(self, name: str, namespace) -> list[str]:
        # Only names the depender could actually write are offered
        return names_like(name, self.resolver.visible_names(namespace), self.suggestion_limit, self.suggestion_cutoff)
