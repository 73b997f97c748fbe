"""Shared pytest fixtures for npm-ops tests."""

import json

import pytest

from npm_ops.agents.fake import (
    FakeFileOperations,
    FakePackageSourceLookup,
    FakeProcessExecuter,
    FakeProcessResult,
)
from npm_ops.core.context import ExecutionContext
from npm_ops.core.models import PackageSource

WORKING_DIRECTORY = "/build/work"


@pytest.fixture
def package_sources():
    """Store with one npm source per credential style and one non-npm source."""
    return FakePackageSourceLookup(
        sources=[
            PackageSource(
                name="internal-npm",
                source_type="npm",
                url="https://registry.example.com/npm/",
                user_name="alice",
                password="secret",
            ),
            PackageSource(
                name="keyed-npm",
                source_type="npm",
                url="http://proget.local/npm/feed/",
                api_key="k3y",
            ),
            PackageSource(
                name="anonymous-npm",
                source_type="npm",
                url="https://registry.npmjs.org/",
            ),
            PackageSource(
                name="nuget-feed",
                source_type="nuget",
                url="https://proget.local/nuget/feed/",
            ),
        ]
    )


@pytest.fixture
def file_ops():
    """Empty POSIX file system."""
    return FakeFileOperations()


@pytest.fixture
def processes():
    """Executer whose npm exits 0 silently and reports version 10.2.4."""
    return FakeProcessExecuter()


@pytest.fixture
def make_context(file_ops, processes, package_sources):
    """Factory for contexts sharing the default fakes unless overridden."""

    def _make(**overrides):
        values = {
            "file_ops": file_ops,
            "processes": processes,
            "package_sources": package_sources,
            "working_directory": WORKING_DIRECTORY,
        }
        values.update(overrides)
        return ExecutionContext(**values)

    return _make


@pytest.fixture
def context(make_context):
    """Context backed by the default fakes."""
    return make_context()


@pytest.fixture
def npm_output():
    """Realistic npm install output, warnings on stderr."""
    return FakeProcessResult(
        stdout=["", "added 120 packages in 3s"],
        stderr=[
            "npm warn deprecated inflight@1.0.6: This module is not supported",
            "npm ERR! code E404",
            "npm notice New minor version of npm available!",
            "something unrelated",
        ],
        exit_code=1,
    )


@pytest.fixture
def package_json_dir(tmp_path):
    """Project directory with a package.json."""
    (tmp_path / "package.json").write_text(
        json.dumps(
            {"name": "web-app", "version": "0.0.1", "scripts": {"build": "tsc"}},
            indent=2,
        )
    )
    return tmp_path
