"""
Shared value types and errors for the specification validator.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


class SpecValidatorError(Exception):
    """Base class for errors raised by the validator"""


class DiscoveryError(SpecValidatorError):
    """A directory in the specification tree could not be listed"""


class SourcePathError(SpecValidatorError):
    """A source path does not have the segments the directory convention needs"""


class ConfigurationError(SpecValidatorError):
    """Invalid settings or an unusable schema file"""


class LoadError(SpecValidatorError):
    """A specification document could not be read or parsed"""


@dataclass(frozen=True)
class Finding:
    category: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "message": self.message}


@dataclass(frozen=True)
class ResultRecord:
    source_path: str
    findings: Tuple[Finding, ...] = field(default_factory=tuple)

    @property
    def has_findings(self) -> bool:
        return len(self.findings) > 0


ReportMap = Dict[str, List[Finding]]
