# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Unit tests for OpenAPI document loading"""

import json

import pytest
import yaml

from openapi_mcp_server.core.errors import ConfigurationError
from openapi_mcp_server.openapi.loader import load_openapi_document


def test_load_json(tmp_path, document):
    path = tmp_path / "api.json"
    path.write_text(json.dumps(document))

    assert load_openapi_document(path) == document


def test_load_yaml(tmp_path, document):
    path = tmp_path / "api.yaml"
    path.write_text(yaml.safe_dump(document, sort_keys=False))

    loaded = load_openapi_document(str(path))
    assert loaded["servers"][0]["url"] == "https://api.example.com"
    assert list(loaded["paths"]) == list(document["paths"])


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        load_openapi_document(tmp_path / "nope.json")
    assert "not found" in exc_info.value.message


def test_unparseable_file(tmp_path):
    path = tmp_path / "api.json"
    path.write_text("{broken")

    with pytest.raises(ConfigurationError):
        load_openapi_document(path)


@pytest.mark.parametrize("content", [{"swagger": "2.0"}, ["not", "a", "mapping"]])
def test_non_openapi3_document(tmp_path, content):
    path = tmp_path / "api.json"
    path.write_text(json.dumps(content))

    with pytest.raises(ConfigurationError):
        load_openapi_document(path)
