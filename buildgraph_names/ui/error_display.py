"""Terminal display for name resolution errors."""

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..name_resolution import DuplicateDefinitionError
from ..name_resolution import DuplicateRenameTargetError
from ..name_resolution import InvalidModuleNameError
from ..name_resolution import MissingDependencyError
from ..name_resolution import NameResolutionError
from ..name_resolution import RenameSourceMissingError
from ..name_resolution import SkippedDependencyError
from ..name_resolution import UndefinedDependencyError
from ..name_resolution import UnknownNamespaceImportError

ERROR_PREFIX = "error: "


def format_error(error: NameResolutionError) -> Text:
    """Render one error as ``error: <message>``.

    Messages are added as plain text so module names are never parsed as
    Rich markup; continuation lines already carry the indent that lines
    them up under the prefix.
    """
    text = Text()
    text.append(ERROR_PREFIX, style="bold red")
    text.append(str(error))
    return text


def get_actionable_tip(error: NameResolutionError) -> str | None:
    """Suggest a next step for the build-file author, if one applies."""
    if isinstance(error, DuplicateDefinitionError):
        return "Rename one of the modules or delete the duplicate definition"
    if isinstance(error, DuplicateRenameTargetError):
        return f"Pick a rename target other than '{error.new_name}'"
    if isinstance(error, RenameSourceMissingError):
        return f"Check that '{error.old_name}' is defined before it is renamed"
    if isinstance(error, SkippedDependencyError):
        return f"Stop skipping '{error.dependency}' or drop the dependency on it"
    if isinstance(error, UndefinedDependencyError) and error.suggestions:
        return f"Check the spelling of '{error.dependency}'"
    if isinstance(error, InvalidModuleNameError):
        return "Module names are plain identifiers; write '//path:name' only when referencing a module"
    if isinstance(error, UnknownNamespaceImportError):
        return "Declare the imported namespace or remove the import"
    return None


def display_resolution_errors(console: Console, errors: Sequence[NameResolutionError], verbose: bool = False) -> None:
    """Print every error followed by a one-line summary.

    Args:
        console: Rich console for output
        errors: Errors returned by the resolver or graph builder
        verbose: If True, print an actionable tip under each error
    """
    for error in errors:
        console.print(format_error(error), soft_wrap=True)
        if verbose and (tip := get_actionable_tip(error)):
            console.print(Text(f"{' ' * len(ERROR_PREFIX)}Tip: {tip}", style="dim"))

    if not errors:
        console.print("[green]No name resolution errors[/green]")
        return

    missing = sum(1 for error in errors if isinstance(error, MissingDependencyError))
    summary = f"{len(errors)} error(s)"
    if missing:
        summary += f", {missing} missing dependenc{'y' if missing == 1 else 'ies'}"
    console.print()
    console.print(Panel(Text(summary, style="bold"), title="[bold red]Name Resolution Failed[/bold red]", border_style="red"))
