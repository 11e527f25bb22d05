"""Tests for the manifest-driven graph builder."""

import logging

from buildgraph_names import GraphBuilder
from buildgraph_names.manifest import Manifest
from buildgraph_names.manifest import ModuleDefinition
from buildgraph_names.manifest import NamespaceDefinition
from buildgraph_names.manifest import RenameDefinition
from buildgraph_names.manifest import SkippedDefinition
from buildgraph_names.name_resolution import DuplicateDefinitionError
from buildgraph_names.name_resolution import InvalidModuleNameError
from buildgraph_names.name_resolution import NamespacedNameResolver
from buildgraph_names.name_resolution import RenameSourceMissingError
from buildgraph_names.name_resolution import SimpleNameResolver
from buildgraph_names.name_resolution import SkippedDependencyError
from buildgraph_names.name_resolution import UndefinedDependencyError
from buildgraph_names.name_resolution import UnknownNamespaceImportError


def module(name, file="Android.bp", line=1, deps=()):
    return ModuleDefinition(name=name, file=file, line=line, deps=list(deps))


class TestFlatBuild:
    """Test building with the flat resolver."""

    def test_resolves_edges(self):
        manifest = Manifest(modules=[module("app", deps=["libfoo"]), module("libfoo", deps=["libbase"]), module("libbase")])

        result = GraphBuilder(SimpleNameResolver()).build(manifest)

        assert result.ok
        assert [group.name for group in result.groups] == ["app", "libbase", "libfoo"]
        assert result.edges == {"app": ["libfoo"], "libfoo": ["libbase"], "libbase": []}

    def test_aggregates_errors_across_modules(self):
        manifest = Manifest(
            modules=[
                module("libfoo", line=1, deps=["libbarr"]),
                module("libfoo", line=9),
                module("libbar"),
                module("app", deps=["libqux", "libzzz"]),
            ],
            skipped=[
                SkippedDefinition(name="libqux", file="a.bp", reason="license"),
                SkippedDefinition(name="libqux", file="b.bp", reason="platform mismatch"),
            ],
        )

        result = GraphBuilder(SimpleNameResolver()).build(manifest)

        assert not result.ok
        duplicate, undefined, skipped, unknown = result.errors
        assert isinstance(duplicate, DuplicateDefinitionError)
        assert isinstance(undefined, UndefinedDependencyError)
        assert undefined.suggestions == ["libbar"]
        assert isinstance(skipped, SkippedDependencyError)
        assert [info.filename for info in skipped.skip_infos] == ["a.bp", "b.bp"]
        assert isinstance(unknown, UndefinedDependencyError)
        assert unknown.suggestions == []

    def test_failed_registration_is_not_resolved(self):
        manifest = Manifest(modules=[module("libfoo"), module("libfoo", deps=["missing"])])

        result = GraphBuilder(SimpleNameResolver()).build(manifest)

        assert len(result.errors) == 1
        assert result.edges == {"libfoo": []}

    def test_renames_apply_before_resolution(self):
        manifest = Manifest(
            modules=[module("old"), module("app", deps=["new"])],
            renames=[RenameDefinition(old="old", new="new"), RenameDefinition(old="ghost", new="spirit")],
        )

        result = GraphBuilder(SimpleNameResolver()).build(manifest)

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], RenameSourceMissingError)
        assert result.edges["app"] == ["new"]
        assert [group.name for group in result.groups] == ["app", "new"]

    def test_suggestions_can_be_disabled(self):
        manifest = Manifest(modules=[module("libfoo"), module("app", deps=["libfooo"])])

        result = GraphBuilder(SimpleNameResolver(), suggestion_limit=0).build(manifest)

        assert result.errors[0].suggestions == []

    def test_namespaces_are_ignored_with_warning(self, caplog):
        manifest = Manifest(namespaces=[NamespaceDefinition(path="vendor")], modules=[module("libfoo")])

        with caplog.at_level(logging.WARNING):
            result = GraphBuilder(SimpleNameResolver()).build(manifest)

        assert result.ok
        assert "Ignoring 1 namespace declaration(s)" in caplog.text


class TestNamespacedBuild:
    """Test building with the namespaced resolver."""

    def test_edges_use_unique_names(self):
        manifest = Manifest(
            namespaces=[NamespaceDefinition(path="vendor/acme", imports=["libs"]), NamespaceDefinition(path="libs")],
            modules=[
                module("libutil", file="libs/Android.bp"),
                module("libutil", file="vendor/acme/Android.bp", deps=["//libs:libutil"]),
                module("app", file="vendor/acme/Android.bp", deps=["libutil"]),
            ],
        )

        result = GraphBuilder(NamespacedNameResolver()).build(manifest)

        assert result.ok
        assert result.edges == {
            "//libs:libutil": [],
            "//vendor/acme:libutil": ["//libs:libutil"],
            "//vendor/acme:app": ["//vendor/acme:libutil"],
        }

    def test_qualified_looking_name_is_an_error_not_a_crash(self):
        manifest = Manifest(
            namespaces=[NamespaceDefinition(path="a")],
            modules=[module("//a:x", file="Android.bp"), module("x", file="a/Android.bp")],
        )

        result = GraphBuilder(NamespacedNameResolver()).build(manifest)

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], InvalidModuleNameError)
        assert [group.name for group in result.groups] == ["x"]
        assert result.edges == {"//a:x": []}

    def test_suggestions_only_name_reachable_modules(self):
        manifest = Manifest(
            namespaces=[NamespaceDefinition(path="a"), NamespaceDefinition(path="b")],
            modules=[
                module("libbaz", file="b/Android.bp"),
                module("app", file="a/Android.bp", deps=["libbazz"]),
            ],
        )

        result = GraphBuilder(NamespacedNameResolver()).build(manifest)

        (error,) = result.errors
        assert isinstance(error, UndefinedDependencyError)
        assert error.suggestions == ["//b:libbaz"]
        assert "libbaz" not in error.suggestions

    def test_suggestions_prefer_short_names_when_visible(self):
        manifest = Manifest(
            namespaces=[NamespaceDefinition(path="a", imports=["b"]), NamespaceDefinition(path="b")],
            modules=[
                module("libbaz", file="b/Android.bp"),
                module("app", file="a/Android.bp", deps=["libbazz"]),
            ],
        )

        result = GraphBuilder(NamespacedNameResolver()).build(manifest)

        assert result.errors[0].suggestions == ["libbaz"]

    def test_unknown_import_is_reported(self):
        manifest = Manifest(namespaces=[NamespaceDefinition(path="vendor", imports=["nowhere"])])

        result = GraphBuilder(NamespacedNameResolver()).build(manifest)

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], UnknownNamespaceImportError)


class TestLookup:
    def test_lookup_found(self):
        builder = GraphBuilder(SimpleNameResolver())
        builder.build(Manifest(modules=[module("libfoo")]))

        group, error = builder.lookup("libfoo", "Android.bp")

        assert group.name == "libfoo"
        assert error is None

    def test_lookup_missing_uses_file_as_depender(self):
        builder = GraphBuilder(SimpleNameResolver())
        builder.build(Manifest(modules=[module("libfoo")]))

        group, error = builder.lookup("libfo", "x/Android.bp")

        assert group is None
        assert str(error) == '"x/Android.bp" depends on undefined module "libfo". Did you mean ["libfoo"]?'
