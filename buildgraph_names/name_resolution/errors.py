"""Name resolution errors.

Caller-facing failures are returned as lists of ``NameResolutionError``
instances so the graph builder can aggregate them across many modules.
Only programming errors (broken storage invariants, foreign namespace
handles) are raised.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from .models import SkippedModuleInfo
from .models import SourcePosition

# Continuation lines line up with the "error: " prefix used when displaying
CONTINUATION_INDENT = " " * len("error: ")


def quote(value: str) -> str:
    """Quote a name for diagnostics (double quotes, backslash escapes)."""
    return json.dumps(value, ensure_ascii=False)


def quote_list(values: Sequence[str]) -> str:
    return "[" + " ".join(quote(v) for v in values) + "]"


class NameResolutionError(Exception):
    """Base class for recoverable name resolution failures."""


class DuplicateDefinitionError(NameResolutionError):
    """A module name was registered twice in the same namespace."""

    def __init__(self, name: str, previous: SourcePosition, namespace: str | None = None):
        self.name = name
        self.previous = previous
        self.namespace = namespace
        where = f" in namespace {quote(namespace)}" if namespace else ""
        super().__init__(
            f"module {quote(name)} already defined{where}\n"
            f"{CONTINUATION_INDENT}{previous} <-- previous definition here"
        )


class DuplicateRenameTargetError(NameResolutionError):
    """The target of a rename is already registered."""

    def __init__(self, old_name: str, new_name: str, existing: SourcePosition):
        self.old_name = old_name
        self.new_name = new_name
        self.existing = existing
        super().__init__(
            f"renaming module {quote(old_name)} to {quote(new_name)} conflicts with existing module\n"
            f"{CONTINUATION_INDENT}{existing} <-- existing module defined here"
        )


class RenameSourceMissingError(NameResolutionError):
    """The source of a rename was never registered."""

    def __init__(self, old_name: str, new_name: str):
        self.old_name = old_name
        self.new_name = new_name
        super().__init__(f"module {quote(old_name)} to be renamed to {quote(new_name)} doesn't exist")


class InvalidModuleNameError(NameResolutionError):
    """A module name uses the ``//path:name`` qualified-reference syntax."""

    def __init__(self, name: str, pos: SourcePosition | None = None):
        self.name = name
        self.pos = pos
        message = f"module name {quote(name)} is invalid: names may not start with \"//\" or contain \":\""
        if pos is not None:
            message += f"\n{CONTINUATION_INDENT}{pos} <-- defined here"
        super().__init__(message)


class NamespaceAlreadyDeclaredError(NameResolutionError):
    """A directory was declared as a namespace root more than once."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"namespace {quote(path)} already declared")


class UnknownNamespaceImportError(NameResolutionError):
    """A namespace imports another namespace that was never declared."""

    def __init__(self, namespace: str, imported: str):
        self.namespace = namespace
        self.imported = imported
        super().__init__(f"namespace {quote(namespace)} imports undeclared namespace {quote(imported)}")


class MissingDependencyError(NameResolutionError):
    """A dependency name resolved to nothing."""

    def __init__(self, depender: str, dependency: str, message: str):
        self.depender = depender
        self.dependency = dependency
        super().__init__(message)


class SkippedDependencyError(MissingDependencyError):
    """The dependency exists but every definition of it was skipped."""

    def __init__(self, depender: str, dependency: str, skip_infos: Sequence[SkippedModuleInfo]):
        self.skip_infos = list(skip_infos)
        files = ", ".join(info.filename for info in self.skip_infos)
        reasons = "; ".join(info.reason for info in self.skip_infos)
        super().__init__(
            depender,
            dependency,
            f"module {quote(depender)} depends on skipped module {quote(dependency)}; "
            f"{quote(dependency)} was defined in file(s) [{files}], "
            f"but was skipped for reason(s) [{reasons}]",
        )


class UndefinedDependencyError(MissingDependencyError):
    """The dependency is not defined anywhere the depender can see."""

    def __init__(
        self,
        depender: str,
        dependency: str,
        suggestions: Sequence[str] = (),
        searched: Sequence[str] = (),
    ):
        self.suggestions = list(suggestions)
        self.searched = list(searched)
        message = f"{quote(depender)} depends on undefined module {quote(dependency)}."
        if self.suggestions:
            message += f" Did you mean {quote_list(self.suggestions)}?"
        if self.searched:
            message += (
                f"\n{CONTINUATION_INDENT}Module {quote(depender)} can read these "
                f"{len(self.searched)} namespaces: {quote_list(self.searched)}"
            )
        super().__init__(depender, dependency, message)


class StorageInvariantError(RuntimeError):
    """Two live module groups share one name inside the registry.

    Registration rejects duplicates, so this can only come from a bug in a
    resolver's own tables. It is raised, never returned.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate module group name {quote(name)}")


class NamespaceMismatchError(TypeError):
    """A resolver was handed a namespace handle it did not create."""
