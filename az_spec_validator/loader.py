"""
Loading of Swagger 2.0 specification documents.
"""

import json
from typing import Any, Dict, Iterator, Tuple

from .models import LoadError


class SpecDocument:
    """Read-only view of one parsed specification file"""

    def __init__(self, source_path: str, spec: Dict[str, Any]):
        self.source_path = source_path
        self.spec = spec

    @property
    def declared_version(self) -> str:
        info = self.spec.get("info")
        if not isinstance(info, dict):
            return ""
        version = info.get("version")
        return version if isinstance(version, str) else ""

    def path_items(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Yield (url, path item) pairs in document order, skipping x- extensions"""
        paths = self.spec.get("paths")
        if not isinstance(paths, dict):
            return
        for url, item in paths.items():
            if url.startswith("x-") or not isinstance(item, dict):
                continue
            yield url, item


def load_spec_document(source_path: str) -> SpecDocument:
    """Parse a specification file, raising LoadError when it is unusable"""
    try:
        with open(source_path, "r", encoding="utf-8-sig") as f:
            spec = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read {source_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"JSON parsing error in {source_path}: {e}") from e
    except (ValueError, RecursionError) as e:
        # integer digit limit, nesting too deep for the decoder
        raise LoadError(f"JSON parsing error in {source_path}: {type(e).__name__}: {e}") from e

    if not isinstance(spec, dict):
        raise LoadError(f"{source_path}: top-level JSON value must be an object, got {type(spec).__name__}")

    info = spec.get("info")
    if isinstance(info, dict) and "version" in info and not isinstance(info["version"], str):
        raise LoadError(f"{source_path}: info.version must be a string, got {type(info['version']).__name__}")

    return SpecDocument(source_path, spec)
