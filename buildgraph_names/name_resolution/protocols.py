"""Name resolution contracts.

A build graph has one name resolver but potentially many namespaces. The
resolver decides which namespace a module belongs to, enforces name
uniqueness within it and maps dependency strings back to module groups.

Architecture:
- Namespace: marker base for the opaque handles a resolver hands out
- NamespaceContext: tells a resolver where a module came from
- NameResolver: the strategy interface every resolver implements

Resolvers are parameterised by the namespace type they produce, so a
resolver is only ever given back handles of its own kind.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic
from typing import TypeVar

from .errors import MissingDependencyError
from .errors import NameResolutionError
from .models import ModuleGroup
from .models import ModuleInfo
from .models import SkippedModuleInfo


class Namespace:
    """Marker base class for namespace handles."""

    __slots__ = ()

    @property
    def display_name(self) -> str:
        return repr(self)


NamespaceT = TypeVar("NamespaceT", bound=Namespace)


@dataclass(frozen=True)
class NamespaceContext:
    """Information a resolver uses to choose the namespace of a module."""

    module_path: str

    @classmethod
    def from_filename(cls, filename: str) -> NamespaceContext:
        return cls(module_path=filename)

    @classmethod
    def from_module(cls, module: ModuleInfo) -> NamespaceContext:
        return cls(module_path=module.pos.filename)


class NameResolver(ABC, Generic[NamespaceT]):
    """Strategy for locating modules by name.

    Implementations are not synchronised. Registration calls (``new_module``,
    ``new_skipped_module``, ``rename``) must come from a single writer with
    no overlapping reads; once registration is complete, lookups may run
    concurrently.
    """

    @abstractmethod
    def new_module(
        self, ctx: NamespaceContext, group: ModuleGroup, module: ModuleInfo
    ) -> tuple[NamespaceT | None, list[NameResolutionError]]:
        """Register a newly discovered module group.

        Called exactly once per group. A name already present in the chosen
        namespace is rejected and nothing is stored.

        Returns:
            Tuple of (namespace the group was placed in, errors)
        """

    @abstractmethod
    def new_skipped_module(self, ctx: NamespaceContext, name: str, skip_info: SkippedModuleInfo) -> None:
        """Record that a module was pruned from the graph. Empty names are ignored."""

    @abstractmethod
    def module_from_name(self, module_name: str, namespace: NamespaceT | None) -> tuple[ModuleGroup | None, bool]:
        """Find the module group visible under ``module_name`` from ``namespace``."""

    @abstractmethod
    def skipped_module_from_name(
        self, module_name: str, namespace: NamespaceT | None
    ) -> tuple[list[SkippedModuleInfo], bool]:
        """Find the skip records visible under ``module_name`` from ``namespace``."""

    @abstractmethod
    def missing_dependency_error(
        self,
        depender: str,
        depender_namespace: NamespaceT | None,
        dependency: str,
        guess: Sequence[str] = (),
    ) -> MissingDependencyError:
        """Build the diagnostic for a dependency that could not be found.

        Skipped dependencies explain every file and reason they were skipped
        for; undefined ones carry the spelling suggestions in ``guess``.
        """

    @abstractmethod
    def rename(self, old_name: str, new_name: str, namespace: NamespaceT | None) -> list[NameResolutionError]:
        """Move a group to a new name, mutating the shared group in place."""

    @abstractmethod
    def all_modules(self) -> list[ModuleGroup]:
        """Return all module groups in a deterministic order.

        Raises:
            StorageInvariantError: Two stored groups share one name
        """

    def visible_names(self, namespace: NamespaceT | None) -> list[str]:
        """Names a reference written in ``namespace`` could use to reach each group.

        Used as spelling-suggestion candidates, so every returned name must
        resolve from ``namespace``.
        """
        return [group.name for group in self.all_modules()]

    @abstractmethod
    def get_namespace(self, ctx: NamespaceContext) -> NamespaceT | None:
        """Return the namespace that owns modules defined at ``ctx``."""

    @abstractmethod
    def unique_name(self, ctx: NamespaceContext, name: str) -> str:
        """Return a deterministic name that is unique across all namespaces."""
