"""Tests for batch loading and action filtering.

Result order carries no meaning, so assertions compare sets of paths.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import logging

import pytest

from rego_loader.exceptions import RegoSyntaxError
from rego_loader.loader import (
    File,
    filter_by_action,
    load_all,
    load_libraries,
    load_policies,
    load_policies_with_action,
)


def _paths(rego_files: list[File]) -> set[str]:
    return {rego_file.file_path for rego_file in rego_files}


@pytest.fixture
def action_files() -> dict[str, str]:
    """a.rego declares deny and warn, b.rego declares only allow."""
    return {
        "a.rego": (
            "package a\n"
            'deny[msg] { msg := "no" }\n'
            'warn[msg] { msg := "careful" }\n'
        ),
        "b.rego": "package b\nallow { true }\n",
    }


class TestLoadAll:
    """Tests for load_all()."""

    def test_one_record_per_entry(self, policy_files: dict[str, str]):
        # Act
        result = load_all(policy_files)

        # Assert
        assert _paths(result) == set(policy_files)

    def test_empty_mapping(self):
        assert load_all({}) == []

    def test_failure_aborts_whole_batch(self, policy_files: dict[str, str]):
        # Arrange
        files = dict(policy_files)
        files["policy/broken.rego"] = "package broken\n\ndeny[msg] {\n"

        # Act
        with pytest.raises(RegoSyntaxError) as exc_info:
            load_all(files)

        # Assert
        error = exc_info.value
        assert error.path == "policy/broken.rego"
        assert error.context == ("load rego files", "new rego file", "parse module")
        assert str(error).startswith("load rego files: new rego file: parse module: policy/broken.rego:4:")

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture):
        # Arrange
        caplog.set_level(logging.ERROR, logger="rego-loader")

        # Act
        with pytest.raises(RegoSyntaxError):
            load_all({"bad.rego": "nonsense"})

        # Assert
        events = [record.msg for record in caplog.records]
        assert events[0]["event"] == "rego_parse_failed"
        assert events[0]["file_path"] == "bad.rego"

    def test_success_is_logged(self, policy_files: dict[str, str], caplog: pytest.LogCaptureFixture):
        # Arrange
        caplog.set_level(logging.INFO, logger="rego-loader")

        # Act
        load_all(policy_files)

        # Assert
        events = [record.msg for record in caplog.records]
        assert {"event": "rego_files_loaded", "count": 3} in events


class TestLoadLibraries:
    """Tests for load_libraries()."""

    def test_returns_every_file(self, action_files: dict[str, str]):
        # Act
        result = load_libraries(action_files)

        # Assert
        assert _paths(result) == {"a.rego", "b.rego"}

    def test_propagates_errors(self):
        with pytest.raises(RegoSyntaxError, match="load rego files"):
            load_libraries({"bad.rego": "package"})


class TestLoadPolicies:
    """Tests for load_policies()."""

    def test_only_files_with_actions(self, action_files: dict[str, str]):
        # Act
        result = load_policies(action_files)

        # Assert
        assert _paths(result) == {"a.rego"}

    def test_fixture_policies(self, policy_files: dict[str, str]):
        # Act
        result = load_policies(policy_files)

        # Assert
        assert _paths(result) == {"policy/deployment.rego", "policy/replicas.rego"}

    def test_no_policies(self):
        # Act
        result = load_policies({"lib.rego": "package lib\nx := 1\n"})

        # Assert
        assert result == []


class TestLoadPoliciesWithAction:
    """Tests for load_policies_with_action()."""

    @pytest.mark.parametrize(
        ("action", "expected"),
        [
            ("deny", {"a.rego"}),
            ("warn", {"a.rego"}),
            ("allow", set()),
            ("violation", set()),
        ],
    )
    def test_filters_by_action(self, action_files: dict[str, str], action: str, expected: set[str]):
        # Act
        result = load_policies_with_action(action_files, action)

        # Assert
        assert _paths(result) == expected

    def test_deny_and_warn_in_separate_files(self):
        # Arrange
        files = {
            "a.rego": 'package p\ndeny[msg] { msg := "no" }\n',
            "b.rego": 'package q\nwarn[msg] { msg := "careful" }\n',
        }

        # Act
        result = load_policies_with_action(files, "deny")

        # Assert
        assert _paths(result) == {"a.rego"}

    def test_empty_action_same_as_load_policies(self, policy_files: dict[str, str]):
        # Act
        with_empty = load_policies_with_action(policy_files, "")
        policies = load_policies(policy_files)

        # Assert
        assert _paths(with_empty) == _paths(policies)

    def test_file_returned_once_for_repeated_action(self):
        # Arrange
        files = {"a.rego": 'package a\ndeny[msg] { msg := "1" }\ndeny[msg] { msg := "2" }\n'}

        # Act
        result = load_policies_with_action(files, "deny")

        # Assert
        assert len(result) == 1
        assert result[0].rules_actions == ("deny", "deny")

    def test_action_match_is_exact(self, action_files: dict[str, str]):
        # Act
        result = load_policies_with_action(action_files, "den")

        # Assert
        assert result == []

    def test_failure_aborts_even_if_other_files_match(self, action_files: dict[str, str]):
        # Arrange
        files = dict(action_files)
        files["c.rego"] = "package c\np {"

        # Act & Assert
        with pytest.raises(RegoSyntaxError) as exc_info:
            load_policies_with_action(files, "deny")

        assert exc_info.value.path == "c.rego"


class TestFilterByAction:
    """Tests for filter_by_action() on already loaded files."""

    def test_keeps_input_order(self):
        # Arrange
        files = [
            File(file_path="z.rego", package_name="data.z", contents="", rules_actions=["deny"]),
            File(file_path="a.rego", package_name="data.a", contents="", rules_actions=[]),
            File(file_path="m.rego", package_name="data.m", contents="", rules_actions=["warn", "deny"]),
        ]

        # Act
        result = filter_by_action(files, "deny")

        # Assert
        assert [f.file_path for f in result] == ["z.rego", "m.rego"]

    def test_default_action_selects_policies(self):
        # Arrange
        files = [
            File(file_path="p.rego", package_name="data.p", contents="", rules_actions=["warn"]),
            File(file_path="l.rego", package_name="data.l", contents=""),
        ]

        # Act
        result = filter_by_action(files)

        # Assert
        assert [f.file_path for f in result] == ["p.rego"]


class TestCustomParser:
    """Tests for passing a parser through the batch functions."""

    def test_parser_used_for_every_file(self, action_files: dict[str, str]):
        # Arrange
        from rego_loader.rego import RegoParser

        class CountingParser(RegoParser):
            def __init__(self):
                self.paths = []

            def parse_module(self, path, text):
                self.paths.append(path)
                return super().parse_module(path, text)

        parser = CountingParser()

        # Act
        load_policies_with_action(action_files, "deny", parser=parser)

        # Assert
        assert sorted(parser.paths) == ["a.rego", "b.rego"]
