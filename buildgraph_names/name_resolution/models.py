"""Data models shared by all name resolvers.

- SourcePosition: where in a build file a module was defined
- ModuleInfo: one module variant as handed over by the graph parser
- ModuleGroup: the named entity a resolver registers (shared, mutable)
- SkippedModuleInfo: why a named module was left out of the graph
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocols import Namespace


@dataclass(frozen=True)
class SourcePosition:
    """Location of a definition inside a build file."""

    filename: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if not self.line:
            return self.filename
        if not self.column:
            return f"{self.filename}:{self.line}"
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class ModuleInfo:
    """A single module variant.

    Resolvers treat this as opaque apart from ``pos``, which they quote in
    diagnostics.
    """

    name: str
    pos: SourcePosition
    variant: str = ""


@dataclass(eq=False)
class ModuleGroup:
    """A named unit in the build graph, aggregating its module variants.

    Groups are compared by identity. The registry and every caller hold the
    same object, so a rename performed by a resolver is visible everywhere.

    Attributes:
        name: Current name of the group (mutated in place on rename)
        modules: Ordered, non-empty list of variants sharing the name
        namespace: Namespace assigned at registration, if the resolver uses one
    """

    name: str
    modules: list[ModuleInfo]
    namespace: Namespace | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.modules:
            raise ValueError(f"Module group '{self.name}' needs at least one module")

    def first_module(self) -> ModuleInfo:
        """Return the first inserted variant, used to point at the definition site."""
        return self.modules[0]

    def add_variant(self, module: ModuleInfo) -> None:
        self.modules.append(module)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SkippedModuleInfo:
    """Explains why a module was deliberately excluded from the graph."""

    filename: str
    reason: str
