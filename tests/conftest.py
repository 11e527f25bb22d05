"""Pytest configuration for buildgraph tests."""

import textwrap
from pathlib import Path

import pytest
from buildgraph_names.name_resolution import ModuleGroup
from buildgraph_names.name_resolution import ModuleInfo
from buildgraph_names.name_resolution import NamespaceContext
from buildgraph_names.name_resolution import SourcePosition


def _make_group(name: str, filename: str = "Android.bp", line: int = 1, variants: tuple[str, ...] = ("",)) -> ModuleGroup:
    pos = SourcePosition(filename, line, 1)
    return ModuleGroup(name, [ModuleInfo(name=name, pos=pos, variant=v) for v in variants])


def _register(resolver, group: ModuleGroup):
    module = group.first_module()
    namespace, errors = resolver.new_module(NamespaceContext.from_module(module), group, module)
    if not errors:
        group.namespace = namespace
    return namespace, errors


@pytest.fixture
def make_group():
    """Factory for module groups defined at ``filename:line:1``."""
    return _make_group


@pytest.fixture
def register():
    """Register a group from the build file of its first module."""
    return _register


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a YAML manifest into tmp_path and return its path."""

    def _write(content: str, name: str = "manifest.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path

    return _write
