# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures: a small OpenAPI document and a recording upstream API.
"""

import copy
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from openapi_mcp_server.client.http_client import ConnectionConfig


SAMPLE_DOCUMENT: Dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Sample API", "version": "1.0.0"},
    "servers": [{"url": "https://api.example.com"}],
    "paths": {
        "/pages/{id}": {
            "parameters": [
                {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "operationId": "retrieve-a-page",
                "summary": "Retrieve a page",
                "parameters": [
                    {
                        "name": "filter_properties",
                        "in": "query",
                        "description": "Property ids to include",
                        "schema": {"type": "array", "items": {"type": "string"}},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Page"}}},
                    },
                    "404": {"description": "Page not found"},
                },
            },
            "patch": {
                "operationId": "patch-page",
                "summary": "Update page properties",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "archived": {"type": "boolean"},
                                    "properties": {"type": "object"},
                                },
                            }
                        }
                    }
                },
                "responses": {"200": {"description": "OK"}},
            },
        },
        "/pages": {
            "post": {
                "operationId": "post-page",
                "summary": "Create a page",
                "parameters": [
                    {"name": "X-Request-Id", "in": "header", "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/PageCreate"}}},
                },
                "responses": {
                    "200": {"description": "OK"},
                    "400": {"description": "Bad request"},
                },
            },
        },
        "/blocks/{block_id}/children": {
            "get": {
                "operationId": "get-block-children",
                "parameters": [
                    {"name": "block_id", "in": "path", "required": True, "schema": {"type": "string"}},
                    {"name": "page_size", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Block"}}},
                    },
                },
            },
        },
        "/search": {
            "post": {
                "summary": "Search by title",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"type": "array", "items": {"type": "string"}},
                        }
                    }
                },
                "responses": {"200": {"description": "OK"}},
            },
        },
    },
    "components": {
        "schemas": {
            "Page": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "parent": {"$ref": "#/components/schemas/Parent"},
                },
            },
            "Parent": {
                "type": "object",
                "properties": {"page_id": {"type": "string"}},
            },
            "PageCreate": {
                "type": "object",
                "required": ["parent"],
                "properties": {
                    "parent": {"$ref": "#/components/schemas/Parent"},
                    "title": {"type": "string"},
                },
            },
            "Block": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/Block"}},
                },
            },
        }
    },
}


class UpstreamRecorder:
    """Stand-in for the described API: records requests, returns canned responses."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: Dict[Tuple[str, str], Tuple[int, Dict[str, Any]]] = {}
        self._failures: Dict[Tuple[str, str], Exception] = {}

    def respond(self, method: str, path: str, status_code: int = 200, json: Any = None, text: Optional[str] = None):
        kwargs: Dict[str, Any] = {"text": text} if text is not None else {"json": json}
        self._responses[(method, path)] = (status_code, kwargs)

    def fail(self, method: str, path: str, error: Exception):
        self._failures[(method, path)] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self._failures:
            raise self._failures[key]
        if key in self._responses:
            status_code, kwargs = self._responses[key]
            return httpx.Response(status_code, **kwargs)
        return httpx.Response(200, json={"object": "ok", "path": request.url.path})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def document() -> Dict[str, Any]:
    """A fresh copy of the sample OpenAPI document"""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def connection() -> ConnectionConfig:
    return ConnectionConfig(base_url="https://api.example.com", credential="k", api_version="v1")
