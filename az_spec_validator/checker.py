"""
Convention checks applied to each specification document.

Rules run in a fixed order: schema version, preview without preview version,
stable with preview version, list operation using POST.
"""

import logging
from typing import Callable, List, Tuple

from .categories import RULE_EVALUATION_FAILED, Category, EnabledCategories
from .loader import SpecDocument
from .locator import SourcePath
from .models import Finding

logger = logging.getLogger(__name__)

PREVIEW_MARKER = "preview"
LIST_PREFIX = "list"


def check_schema_version(document: SpecDocument, source: SourcePath) -> List[Finding]:
    """Path version segment must equal info.version"""
    declared = document.declared_version
    if source.version == declared:
        return []
    return [Finding(
        Category.INCORRECT_SCHEMA_VERSION.value,
        f"incorrect schema version. Path: {source.version}, Spec: {declared}",
    )]


def check_preview_without_preview_version(document: SpecDocument, source: SourcePath) -> List[Finding]:
    declared = document.declared_version
    if source.is_preview and PREVIEW_MARKER not in declared:
        return [Finding(
            Category.PREVIEW_SCHEMA_WITHOUT_PREVIEW_VERSION.value,
            f"preview schema without preview version. Path: {source.version}, Spec: {declared}",
        )]
    return []


def check_stable_with_preview_version(document: SpecDocument, source: SourcePath) -> List[Finding]:
    declared = document.declared_version
    if not source.is_preview and PREVIEW_MARKER in declared:
        return [Finding(
            Category.STABLE_SCHEMA_WITH_PREVIEW_VERSION.value,
            f"stable schema with preview version. Path: {source.version}, Spec: {declared}",
        )]
    return []


def check_list_operation_using_post(document: SpecDocument, source: SourcePath) -> List[Finding]:
    """List operations are read-only and should be GET"""
    findings = []
    for url, item in document.path_items():
        # trailing segment of the url
        ending = url.split("/")[-1]
        if "post" in item and ending.startswith(LIST_PREFIX):
            findings.append(Finding(
                Category.LIST_OPERATION_USING_POST.value,
                f"list operation using post. Path: {url}",
            ))
    return findings


Rule = Callable[[SpecDocument, SourcePath], List[Finding]]

RULES: List[Tuple[Category, Rule]] = [
    (Category.INCORRECT_SCHEMA_VERSION, check_schema_version),
    (Category.PREVIEW_SCHEMA_WITHOUT_PREVIEW_VERSION, check_preview_without_preview_version),
    (Category.STABLE_SCHEMA_WITH_PREVIEW_VERSION, check_stable_with_preview_version),
    (Category.LIST_OPERATION_USING_POST, check_list_operation_using_post),
]


def check_consistency(document: SpecDocument, source: SourcePath, enabled: EnabledCategories) -> List[Finding]:
    """Apply every enabled rule to a loaded document"""
    findings: List[Finding] = []
    for category, rule in RULES:
        if category not in enabled:
            continue
        try:
            findings.extend(rule(document, source))
        except Exception as e:
            logger.exception("Rule %s failed on %s", category.value, source.path)
            findings.append(Finding(
                RULE_EVALUATION_FAILED,
                f"{category.value} check failed: {e}",
            ))
    return findings
