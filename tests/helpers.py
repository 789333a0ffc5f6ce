"""Builders shared by the test modules."""

SOURCE = "specs"


def make_spec(version="2020-01-01", paths=None, **extra):
    spec = {
        "swagger": "2.0",
        "info": {"title": "Service", "version": version},
        "paths": paths if paths is not None else {},
    }
    spec.update(extra)
    return spec


def list_post_paths():
    return {
        "/items/list": {
            "post": {"responses": {"200": {"description": "OK"}}},
        },
    }
