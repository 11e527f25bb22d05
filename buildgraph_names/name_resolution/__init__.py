"""Module name resolution.

Resolvers map the module names written in build definitions to the module
groups they refer to and diagnose duplicates, bad renames and missing
dependencies.
"""

from .errors import DuplicateDefinitionError
from .errors import DuplicateRenameTargetError
from .errors import InvalidModuleNameError
from .errors import MissingDependencyError
from .errors import NameResolutionError
from .errors import NamespaceAlreadyDeclaredError
from .errors import NamespaceMismatchError
from .errors import RenameSourceMissingError
from .errors import SkippedDependencyError
from .errors import StorageInvariantError
from .errors import UndefinedDependencyError
from .errors import UnknownNamespaceImportError
from .models import ModuleGroup
from .models import ModuleInfo
from .models import SkippedModuleInfo
from .models import SourcePosition
from .namespaced import NamespacedNameResolver
from .namespaced import PathNamespace
from .protocols import NameResolver
from .protocols import Namespace
from .protocols import NamespaceContext
from .simple import SimpleNameResolver
from .suggestions import names_like

__all__ = [
    "DuplicateDefinitionError",
    "DuplicateRenameTargetError",
    "InvalidModuleNameError",
    "MissingDependencyError",
    "ModuleGroup",
    "ModuleInfo",
    "NameResolutionError",
    "NameResolver",
    "Namespace",
    "NamespaceAlreadyDeclaredError",
    "NamespaceContext",
    "NamespaceMismatchError",
    "NamespacedNameResolver",
    "PathNamespace",
    "RenameSourceMissingError",
    "SimpleNameResolver",
    "SkippedDependencyError",
    "SkippedModuleInfo",
    "SourcePosition",
    "StorageInvariantError",
    "UndefinedDependencyError",
    "UnknownNamespaceImportError",
    "names_like",
]
