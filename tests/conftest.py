"""
Shared fixtures: build specification trees under a temporary directory.

The fixed positional parsing expects a one-segment source root, so tests
chdir into tmp_path and use the relative source "specs".
"""

import json
import os

import pytest

from tests.helpers import SOURCE, make_spec


@pytest.fixture
def spec_tree(tmp_path, monkeypatch):
    """Return a function that writes a spec file and returns its source path."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / SOURCE / "specification").mkdir(parents=True)

    def write(namespace="foo", stability="stable", version_dir="2020-01-01",
              name="svc.json", spec=None, raw=None, resource_namespace="bar"):
        directory = tmp_path / SOURCE / "specification" / namespace / "resource-manager" / resource_namespace / stability / version_dir
        directory.mkdir(parents=True, exist_ok=True)
        content = raw if raw is not None else json.dumps(spec if spec is not None else make_spec(version_dir))
        (directory / name).write_text(content, encoding="utf-8")
        return "/".join([SOURCE, "specification", namespace, "resource-manager", resource_namespace,
                         stability, version_dir, name])

    return write


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep AZ_SPEC_VALIDATOR_* variables from the caller's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("AZ_SPEC_VALIDATOR_"):
            monkeypatch.delenv(name, raising=False)
