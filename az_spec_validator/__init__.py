"""Validator for Azure Resource Manager API specification trees."""

__version__ = "0.1.0"
