"""
Run settings resolved from command-line flags, environment and defaults.

Precedence: flag > environment variable > default. Environment variables use
the AZ_SPEC_VALIDATOR_ prefix with the flag name uppercased and hyphens
replaced by underscores, e.g. --source -> AZ_SPEC_VALIDATOR_SOURCE.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .models import ConfigurationError

ENV_PREFIX = "AZ_SPEC_VALIDATOR"

DEFAULT_SOURCE = "./azure-rest-api-specs"
DEFAULT_OUTPUT = "validation-errors.json"

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")


def env_var_name(flag: str) -> str:
    return f"{ENV_PREFIX}_{flag.upper().replace('-', '_')}"


def split_categories(values: List[str]) -> List[str]:
    """Flatten repeated and comma-separated category values"""
    categories = []
    for value in values:
        categories.extend(part.strip() for part in value.split(",") if part.strip())
    return categories


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass
class Settings:
    source: str = DEFAULT_SOURCE
    output: str = DEFAULT_OUTPUT
    # None means no list was supplied and the built-in category defaults apply
    categories: Optional[List[str]] = None
    schema: Optional[str] = None
    verbose: bool = False


def resolve_settings(
    source: Optional[str] = None,
    output: Optional[str] = None,
    categories: Optional[List[str]] = None,
    schema: Optional[str] = None,
    verbose: Optional[bool] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge explicit flag values with the environment"""
    if environ is None:
        environ = os.environ

    def pick(flag: str, value):
        if value is not None:
            return value
        return environ.get(env_var_name(flag))

    settings = Settings()
    settings.source = pick("source", source) or DEFAULT_SOURCE
    settings.output = pick("output", output) or DEFAULT_OUTPUT
    settings.schema = pick("schema", schema) or None

    if categories is not None:
        settings.categories = split_categories(categories)
    elif env_var_name("categories") in environ:
        settings.categories = split_categories([environ[env_var_name("categories")]])

    if verbose:
        settings.verbose = True
    elif env_var_name("verbose") in environ:
        settings.verbose = _parse_bool(env_var_name("verbose"), environ[env_var_name("verbose")])

    return settings
