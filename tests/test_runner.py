"""
End-to-end tests for the worker pool over real directory trees.
"""

import threading

import pytest

from az_spec_validator import runner as runner_module
from az_spec_validator.categories import ALL_CATEGORY_NAMES, LOAD_ERROR, RULE_EVALUATION_FAILED, build_enabled_categories
from az_spec_validator.locator import find_spec_files
from az_spec_validator.models import ResultRecord, SourcePathError
from az_spec_validator.report import ReportAggregator
from az_spec_validator.runner import WORKER_COUNT, SpecValidationRunner
from tests.helpers import SOURCE, list_post_paths, make_spec


def run(enabled=None, workers=WORKER_COUNT, subscribers=()):
    runner = SpecValidationRunner(enabled or build_enabled_categories(None), workers=workers)
    return runner.run(find_spec_files(SOURCE), subscribers)


def categories(findings):
    return [finding.category for finding in findings]


def test_empty_tree(spec_tree):
    assert run() == {}


def test_incorrect_schema_version(spec_tree):
    path = spec_tree(stability="stable", version_dir="2020-01-01", spec=make_spec("2020-01-02"))

    report = run()

    assert list(report) == [path]
    assert categories(report[path]) == ["IncorrectSchemaVersion"]


def test_preview_schema_without_preview_version(spec_tree):
    path = spec_tree(stability="preview", version_dir="2021-01-01-preview", spec=make_spec("2021-01-01"))

    report = run()

    assert categories(report[path]).count("PreviewSchemaWithoutPreviewVersion") == 1


def test_list_operation_using_post(spec_tree):
    post = spec_tree(name="post.json", spec=make_spec(paths=list_post_paths()))
    spec_tree(name="get.json", spec=make_spec(paths={
        "/items/list": {"get": {"responses": {"200": {"description": "OK"}}}},
    }))

    report = run()

    assert list(report) == [post]
    assert categories(report[post]) == ["ListOperationUsingPost"]


def test_clean_files_not_reported(spec_tree):
    for index in range(25):
        spec_tree(namespace=f"ns{index:02d}")
    bad = spec_tree(namespace="zz", spec=make_spec("wrong"))

    report = run()

    assert list(report) == [bad]


def test_every_file_processed_once(spec_tree):
    paths = [spec_tree(namespace=f"ns{index:02d}", spec=make_spec("wrong")) for index in range(37)]
    seen = []

    report = run(subscribers=[seen.append])

    assert sorted(report) == sorted(paths)
    assert [progress.processed for progress in seen] == list(range(1, 38))
    assert seen[-1].files_with_errors == 37
    assert all(len(findings) == 1 for findings in report.values())


@pytest.mark.parametrize("workers", [1, 3, WORKER_COUNT])
def test_worker_count_does_not_change_report(spec_tree, workers):
    for index in range(12):
        spec_tree(namespace=f"ns{index:02d}", spec=make_spec("wrong" if index % 2 else "2020-01-01"))

    assert len(run(workers=workers)) == 6


def test_rerun_is_idempotent(spec_tree):
    spec_tree(namespace="a", spec=make_spec("2020-01-02", paths=list_post_paths()))
    spec_tree(namespace="b", stability="preview", version_dir="2021-01-01-preview", spec=make_spec("2021-01-01"))
    spec_tree(namespace="c")
    enabled = build_enabled_categories(ALL_CATEGORY_NAMES)

    first = run(enabled)
    second = run(enabled)

    assert first.keys() == second.keys()
    for path in first:
        assert set(first[path]) == set(second[path])


def test_load_error_skips_rules(spec_tree):
    path = spec_tree(raw='{"info": ')

    report = run(build_enabled_categories(ALL_CATEGORY_NAMES))

    assert categories(report[path]) == [LOAD_ERROR]
    assert "JSON parsing error" in report[path][0].message


def test_schema_validation_when_enabled(spec_tree):
    spec = make_spec(paths={"/items": {"get": {}}})
    path = spec_tree(spec=spec)

    assert run() == {}

    report = run(build_enabled_categories(["SchemaValidationFailed"]))
    assert categories(report[path]) == ["SchemaValidationFailed"]


def test_shallow_source_path_rejected_before_work_starts():
    with pytest.raises(SourcePathError):
        SpecValidationRunner(build_enabled_categories(None)).run(["specification/foo/svc.json"])


def test_aggregator_rejects_duplicate_records():
    aggregator = ReportAggregator(2)
    aggregator.add(ResultRecord("a.json"))

    with pytest.raises(ValueError):
        aggregator.add(ResultRecord("a.json"))


def run_in_thread(timeout=30, **kwargs):
    """Run the pool on a helper thread so a lost record fails instead of hanging."""
    outcome = {}

    def target():
        outcome["report"] = run(**kwargs)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    thread.join(timeout)
    assert not thread.is_alive(), "validation did not finish"
    return outcome["report"]


def test_deeply_nested_json_is_a_load_error(spec_tree):
    path = spec_tree(raw="[" * 200000)
    clean = spec_tree(name="clean.json")

    report = run_in_thread()

    assert list(report) == [path]
    assert clean not in report
    assert categories(report[path]) == [LOAD_ERROR]


def test_huge_integer_version_is_a_load_error(spec_tree):
    path = spec_tree(raw='{"info": {"version": 1' + "0" * 5000 + '}, "paths": {}}')

    report = run_in_thread()

    assert categories(report[path]) == [LOAD_ERROR]


def test_unexpected_crash_still_yields_record(spec_tree, monkeypatch):
    def explode(source_path):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(runner_module, "load_spec_document", explode)
    paths = [spec_tree(namespace=f"ns{index}") for index in range(3)]

    report = run_in_thread()

    assert sorted(report) == sorted(paths)
    for findings in report.values():
        assert categories(findings) == [RULE_EVALUATION_FAILED]
        assert "disk on fire" in findings[0].message
