"""Tests for the JSONL logging bootstrap."""

import json
import logging

import pytest
from buildgraph_names.logging_setup import JsonlHandler
from buildgraph_names.logging_setup import init_json_logging
from buildgraph_names.name_resolution import NamespaceContext
from buildgraph_names.name_resolution import NamespacedNameResolver


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def read_lines(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_writes_structured_lines(tmp_path, restore_root_logger):
    path = tmp_path / "logs" / "buildgraph.log.jsonl"
    init_json_logging(str(path), "debug")

    logging.getLogger("buildgraph_names.test").debug("registered %s", "libfoo", extra={"event": "names:register"})

    (line,) = read_lines(path)
    assert line["lvl"] == "DEBUG"
    assert line["logger"] == "buildgraph_names.test"
    assert line["message"] == "registered libfoo"
    assert line["event"] == "names:register"
    assert line["schema"] == {"name": "buildgraph.log", "ver": "1.0.0"}
    assert "ts" in line


def test_dict_messages_are_merged(tmp_path, restore_root_logger):
    path = tmp_path / "log.jsonl"
    init_json_logging(str(path), "INFO")

    logging.getLogger("buildgraph_names.test").info({"module": "libfoo", "errors": 2})

    (line,) = read_lines(path)
    assert line["module"] == "libfoo"
    assert line["errors"] == 2


def test_reinitialising_replaces_handler(tmp_path, restore_root_logger):
    init_json_logging(str(tmp_path / "first.jsonl"), "INFO")
    init_json_logging(str(tmp_path / "second.jsonl"), "INFO")

    handlers = [h for h in restore_root_logger.handlers if isinstance(h, JsonlHandler)]
    assert len(handlers) == 1
    assert handlers[0].path == tmp_path / "second.jsonl"


def test_level_filters_records(tmp_path, restore_root_logger):
    path = tmp_path / "log.jsonl"
    init_json_logging(str(path), "WARNING")

    logging.getLogger("buildgraph_names.test").info("hidden")
    logging.getLogger("buildgraph_names.test").warning("shown")

    assert [line["message"] for line in read_lines(path)] == ["shown"]


def test_resolver_events_carry_module_fields(tmp_path, restore_root_logger, make_group, register):
    path = tmp_path / "log.jsonl"
    init_json_logging(str(path), "DEBUG")
    resolver = NamespacedNameResolver()
    resolver.declare_namespace("vendor")

    register(resolver, make_group("libfoo", "vendor/Android.bp"))
    resolver.rename("libfoo", "libbar", resolver.get_namespace(NamespaceContext.from_filename("vendor/Android.bp")))

    events = [line for line in read_lines(path) if line["event"]]
    assert [(line["event"], line["module_name"], line["namespace"]) for line in events] == [
        ("names.register", "libfoo", "//vendor"),
        ("names.rename", "libbar", "//vendor"),
    ]
