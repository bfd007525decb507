"""Shared test fixtures: sample capability metadata and a clean environment."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from mcpaudit.metadata.loader import parse_metadata
from mcpaudit.metadata.models import DiscoveryResult

_ENV_VARS = (
    "MCPAUDIT_MIN_SEVERITY",
    "MCPAUDIT_EXCLUDE_CATEGORIES",
    "MCPAUDIT_CRITICAL_THRESHOLD",
    "MCPAUDIT_HIGH_THRESHOLD",
    "MCPAUDIT_ENHANCED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def tool(method: str, name: str | None = None, description: str | None = None, audiences=()) -> Dict[str, Any]:
    return {
        "methodName": method,
        "kind": "Tool",
        "name": name,
        "description": description,
        "audiences": list(audiences),
    }


def prompt(method: str, name: str | None = None, description: str | None = None) -> Dict[str, Any]:
    return {"methodName": method, "kind": "Prompt", "name": name, "description": description}


def resource(method: str, name: str | None = None, description: str | None = None) -> Dict[str, Any]:
    return {"methodName": method, "kind": "Resource", "name": name, "description": description}


def document(*classes: Dict[str, Any], path: str = "Sample.dll") -> Dict[str, Any]:
    return {"assemblies": [{"assemblyPath": path, "classes": list(classes)}]}


@pytest.fixture
def security_test_document() -> Dict[str, Any]:
    """Deliberately risky server: tools, prompts and an admin resource class."""
    return document(
        {
            "typeName": "Mcp.TestServer.SecurityTestTools",
            "kind": "ToolType",
            "description": "Tools with intentional security vulnerabilities for testing",
            "audiences": [],
            "members": [
                tool("ExecuteCommand", "execute-command", "Executes arbitrary shell commands"),
                tool("ReadFile", "read-file", "Reads file content from user-specified path"),
                tool("ExecuteQuery", "sql-query", "Executes SQL query with user input"),
                tool("CallApi", "api-call", "Makes HTTP request to user-specified URL"),
                tool("ProcessData", "process-data", "Processes large dataset asynchronously"),
            ],
        },
        {
            "typeName": "Mcp.TestServer.SecurityTestPrompts",
            "kind": "PromptType",
            "description": "Prompts with potential injection vulnerabilities",
            "members": [
                prompt("GetUserPrompt", "user-prompt", "Generates prompt by concatenating user input"),
                prompt("GetFormattedPrompt", "formatted-prompt", "Uses string.Format with user parameter"),
            ],
        },
        {
            "typeName": "Mcp.TestServer.AdminResources",
            "kind": "ResourceType",
            "description": "Administrative resources without access control",
            "members": [
                resource("DeleteAll", "delete-all", "Deletes all system data"),
                resource("GetConfig", "config", "Returns sensitive configuration data"),
            ],
        },
        path="Mcp.TestServer.dll",
    )


@pytest.fixture
def security_test_discovery(security_test_document) -> DiscoveryResult:
    return parse_metadata(security_test_document)


@pytest.fixture
def clean_discovery() -> DiscoveryResult:
    """A server whose metadata trips no heuristic."""
    return parse_metadata(
        document(
            {
                "typeName": "Weather.Tools",
                "kind": "ToolType",
                "audiences": ["reader"],
                "members": [
                    tool("GetForecast", "forecast", "Returns the forecast for a city", ["reader"]),
                ],
            }
        )
    )


@pytest.fixture
def metadata_file(tmp_path: Path, security_test_document) -> Path:
    path = tmp_path / "mcp-metadata.json"
    path.write_text(json.dumps(security_test_document), encoding="utf-8")
    return path


@pytest.fixture
def provider_document() -> Dict[str, Any]:
    """The security test server exactly as the discovery tool serializes it."""

    def member(method, kind, name, title, description):
        return {
            "MethodName": method,
            "Kind": kind,
            "Name": name,
            "Title": title,
            "Description": description,
            "Audiences": [],
        }

    return {
        "GeneratedAtUtc": "2025-01-15T10:30:00+00:00",
        "Assemblies": [
            {
                "AssemblyPath": "/build/Mcp.TestServer.dll",
                "Classes": [
                    {
                        "TypeName": "Mcp.TestServer.SecurityTestTools",
                        "Kind": "ToolType",
                        "Description": "Tools with intentional security vulnerabilities for testing",
                        "Audiences": [],
                        "Members": [
                            member("ExecuteCommand", "Tool", "execute-command", "Execute Shell Command",
                                   "Executes arbitrary shell commands"),
                            member("ReadFile", "Tool", "read-file", "Read File",
                                   "Reads file content from user-specified path"),
                            member("ExecuteQuery", "Tool", "sql-query", "Execute SQL Query",
                                   "Executes SQL query with user input"),
                            member("CallApi", "Tool", "api-call", "Call External API",
                                   "Makes HTTP request to user-specified URL"),
                            member("ProcessData", "Tool", "process-data", "Process Large Data",
                                   "Processes large dataset asynchronously"),
                        ],
                    },
                    {
                        "TypeName": "Mcp.TestServer.SecurityTestPrompts",
                        "Kind": "PromptType",
                        "Description": "Prompts with potential injection vulnerabilities",
                        "Audiences": [],
                        "Members": [
                            member("GetUserPrompt", "Prompt", "user-prompt", "Dynamic User Prompt",
                                   "Generates prompt by concatenating user input"),
                            member("GetFormattedPrompt", "Prompt", "formatted-prompt", "Formatted Prompt",
                                   "Uses string.Format with user parameter"),
                        ],
                    },
                    {
                        "TypeName": "Mcp.TestServer.AdminResources",
                        "Kind": "ResourceType",
                        "Description": "Administrative resources without access control",
                        "Audiences": [],
                        "Members": [
                            member("DeleteAll", "Resource", "delete-all", "Delete All Data",
                                   "Deletes all system data"),
                            member("GetConfig", "Resource", "config", "System Configuration",
                                   "Returns sensitive configuration data"),
                        ],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def provider_file(tmp_path: Path, provider_document) -> Path:
    path = tmp_path / "mcp-discovery.json"
    path.write_text(json.dumps(provider_document, indent=2), encoding="utf-8")
    return path
