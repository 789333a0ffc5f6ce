"""
Structural validation of specification documents against a JSON schema.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError
from openapi_spec_validator.schemas import schema_v2

from .categories import Category
from .loader import SpecDocument
from .models import ConfigurationError, Finding

logger = logging.getLogger(__name__)


def load_schema(schema_file: Path) -> Dict[str, Any]:
    """Load a JSON or YAML schema file."""
    try:
        with open(schema_file, "r", encoding="utf-8") as f:
            schema = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML parsing error in schema {schema_file}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read schema file {schema_file}: {e}") from e

    if not isinstance(schema, dict):
        raise ConfigurationError(f"Schema file {schema_file} does not contain an object")
    return schema


def _location(error) -> str:
    parts = [str(part) for part in error.absolute_path]
    return "/" + "/".join(parts) if parts else "/"


class SchemaValidator:
    """Validates documents against the Swagger 2.0 schema.

    Without a schema file the official Swagger 2.0 JSON schema shipped with
    openapi-spec-validator is used.

    The underlying jsonschema validator is built once and only read
    afterwards, so one instance is shared by all workers.
    """

    def __init__(self, schema_file: Optional[Path] = None):
        if schema_file:
            self.schema_source = str(schema_file)
            schema = load_schema(Path(schema_file))
        else:
            self.schema_source = "official Swagger 2.0 schema"
            schema = dict(schema_v2)
        try:
            Draft4Validator.check_schema(schema)
        except SchemaError as e:
            raise ConfigurationError(f"Invalid schema in {self.schema_source}: {e.message}") from e
        self._validator = Draft4Validator(schema)
        logger.debug("Loaded schema from %s", self.schema_source)

    def validate(self, document: SpecDocument) -> List[Finding]:
        errors = sorted(
            self._validator.iter_errors(document.spec),
            key=lambda error: (_location(error), error.message),
        )
        return [
            Finding(
                Category.SCHEMA_VALIDATION_FAILED.value,
                f"{_location(error)}: {error.message}",
            )
            for error in errors
        ]
