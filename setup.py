# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the OpenAPI to MCP proxy server
"""

from setuptools import setup, find_packages

setup(
    name="openapi-mcp-server",
    version="1.0.0",
    description="Expose OpenAPI operations as MCP tools over SSE, one session per client credential",
    author="Jason Cafarelli",
    packages=find_packages(include=["openapi_mcp_server", "openapi_mcp_server.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.104.0",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "httpx>=0.25.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.24.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "openapi-mcp-server=openapi_mcp_server.main:run",
        ]
    },
)
