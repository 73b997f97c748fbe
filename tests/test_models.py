"""Tests for core data models."""

import logging

import pytest
from pydantic import ValidationError

from npm_ops.core.models import (
    LogEntry,
    MessageLevel,
    NpmOptions,
    OperationResult,
    PackageSource,
    RegistrySource,
    ToolVersion,
)
from npm_ops.core.oplog import OperationLog


class TestMessageLevel:
    """Tests for MessageLevel enum."""

    def test_values(self):
        assert MessageLevel.DEBUG == "debug"
        assert MessageLevel.INFORMATION == "information"
        assert MessageLevel.WARNING == "warning"
        assert MessageLevel.ERROR == "error"

    def test_logging_levels(self):
        assert MessageLevel.DEBUG.logging_level == logging.DEBUG
        assert MessageLevel.INFORMATION.logging_level == logging.INFO
        assert MessageLevel.WARNING.logging_level == logging.WARNING
        assert MessageLevel.ERROR.logging_level == logging.ERROR


class TestToolVersion:
    """Tests for parsing npm versions."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10.2.4", ToolVersion(10, 2, 4)),
            ("  8.19.4\n", ToolVersion(8, 19, 4)),
            ("v9.0.0", ToolVersion(9, 0, 0)),
            ("11.0.0-pre.1", ToolVersion(11, 0, 0)),
            ("7", ToolVersion(7)),
        ],
    )
    def test_parse(self, text, expected):
        assert ToolVersion.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "npm: command not found", "next"])
    def test_unparsable(self, text):
        assert ToolVersion.parse(text) is None


class TestNpmOptions:
    """Tests for NpmOptions."""

    def test_defaults(self):
        options = NpmOptions()

        assert options.scopes == []
        assert options.verbose is False
        assert options.success_exit_code is None
        assert options.allow_self_signed_certificate is False

    def test_scopes_from_multiline_string(self):
        options = NpmOptions(scopes="@acme\n\n  @tools  \n")

        assert options.scopes == ["@acme", "@tools"]

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            NpmOptions(npm_pth="/usr/bin/npm")


class TestPackageSource:
    """Tests for PackageSource."""

    def test_yaml_style_keys(self):
        source = PackageSource.model_validate(
            {"name": "feed", "type": "NPM", "url": "https://x/", "username": "ci"}
        )

        assert source.source_type == "npm"
        assert source.user_name == "ci"

    def test_type_defaults_to_npm(self):
        assert PackageSource(name="feed", url="https://x/").source_type == "npm"

    def test_url_required(self):
        with pytest.raises(ValidationError):
            PackageSource(name="feed")


class TestRegistrySource:
    """Tests for RegistrySource."""

    @pytest.mark.parametrize(
        "credentials, expected",
        [
            ({}, False),
            ({"user_name": "  "}, False),
            ({"user_name": "alice"}, True),
            ({"password": "secret"}, True),
            ({"api_key": "k3y"}, True),
        ],
    )
    def test_has_credentials(self, credentials, expected):
        source = RegistrySource(registry_url="https://x/", source_id="x", **credentials)

        assert source.has_credentials is expected


class TestOperationResult:
    """Tests for OperationResult."""

    def test_calculate_summary(self):
        result = OperationResult(
            operation="install",
            success=True,
            duration_seconds=0.1,
            log=[
                LogEntry(level=MessageLevel.DEBUG, message="a"),
                LogEntry(level=MessageLevel.DEBUG, message="b"),
                LogEntry(level=MessageLevel.ERROR, message="c"),
            ],
        )

        assert result.calculate_summary() == {
            "debug": 2,
            "information": 0,
            "warning": 0,
            "error": 1,
            "total": 3,
        }


class TestOperationLog:
    """Tests for OperationLog."""

    def test_entries_forwarded_to_logging(self, caplog):
        log = OperationLog("install")
        with caplog.at_level(logging.DEBUG, logger="npm_ops.operation"):
            log.warning("deprecated foo")
            log.debug("detail")

        assert [record.levelno for record in caplog.records] == [logging.WARNING, logging.DEBUG]
        assert caplog.records[0].getMessage() == "[install] deprecated foo"
        assert log.messages(MessageLevel.WARNING) == ["deprecated foo"]
        assert log.has_errors is False

        log.error("boom")
        assert log.has_errors is True
