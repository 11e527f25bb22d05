"""Module manifest loading.

A manifest is a YAML description of the modules found by a build-file
parser. It lets the resolvers be driven without a real parser:

```yaml
namespaces:
  - path: vendor/acme
    imports: [libs]
modules:
  - name: libfoo
    file: libs/Android.bp
    line: 3
    variants: [arm64, x86_64]
    deps: [libbar]
skipped:
  - name: libqux
    file: other/Android.bp
    reason: "not under a source root"
renames:
  - from: libfoo
    to: libfoo_legacy
```
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .name_resolution.models import ModuleInfo
from .name_resolution.models import SkippedModuleInfo
from .name_resolution.models import SourcePosition

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a manifest cannot be read or does not validate."""


class ModuleDefinition(BaseModel):
    """A module defined in a build file."""

    name: str = Field(min_length=1, description="Module name")
    file: str = Field(description="Build file that defines the module")
    line: int = Field(default=0, ge=0)
    column: int = Field(default=0, ge=0)
    variants: list[str] = Field(default_factory=lambda: [""], min_length=1)
    deps: list[str] = Field(default_factory=list, description="Names of modules this one depends on")

    @property
    def pos(self) -> SourcePosition:
        return SourcePosition(self.file, self.line, self.column)

    def module_infos(self) -> list[ModuleInfo]:
        return [ModuleInfo(name=self.name, pos=self.pos, variant=variant) for variant in self.variants]


class SkippedDefinition(BaseModel):
    """A module that was found but pruned from the graph."""

    name: str
    file: str
    reason: str

    def skip_info(self) -> SkippedModuleInfo:
        return SkippedModuleInfo(filename=self.file, reason=self.reason)


class NamespaceDefinition(BaseModel):
    """A directory declared as a namespace root."""

    path: str
    imports: list[str] = Field(default_factory=list)


class RenameDefinition(BaseModel):
    """A rename applied after all modules are registered."""

    model_config = ConfigDict(populate_by_name=True)

    old: str = Field(alias="from")
    new: str = Field(alias="to")
    file: str = Field(default="", description="Build file requesting the rename; selects the namespace")


class Manifest(BaseModel):
    namespaces: list[NamespaceDefinition] = Field(default_factory=list)
    modules: list[ModuleDefinition] = Field(default_factory=list)
    skipped: list[SkippedDefinition] = Field(default_factory=list)
    renames: list[RenameDefinition] = Field(default_factory=list)


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest file.

    Args:
        path: Path to a YAML manifest

    Returns:
        Validated Manifest

    Raises:
        ManifestError: File missing, not YAML, or not a valid manifest
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Manifest {path} is not valid YAML: {e}") from e

    try:
        manifest = Manifest.model_validate(data or {})
    except ValidationError as e:
        raise ManifestError(f"Manifest {path} is invalid:\n{e}") from e

    logger.debug(
        f"Loaded manifest {path}: {len(manifest.modules)} modules, "
        f"{len(manifest.skipped)} skipped, {len(manifest.namespaces)} namespaces"
    )
    return manifest
