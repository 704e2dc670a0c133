"""Shared test fixtures — tool outputs, rule files, temp git repos."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest
import yaml

from sastmerge.rules.models import CustomRule
from sastmerge.rules.ids import RuleIdRegistry


def _sarif_result(rule_id: str, index: int, text: str, line: int, start: int, end: int) -> dict:
    return {
        "ruleId": rule_id,
        "ruleIndex": index,
        "level": "warning",
        "message": {"text": text},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {
                        "uri": "file:///src/NetCoreVulnerabilities/Vulnerabilities.cs"
                    },
                    "region": {
                        "startLine": line,
                        "startColumn": start,
                        "endLine": line,
                        "endColumn": end,
                    },
                }
            }
        ],
        "properties": {"warningLevel": 1},
    }


@pytest.fixture
def scs_sarif_output() -> str:
    """Security Code Scan SARIF with four results (one with an empty ruleId)."""
    return json.dumps({
        "$schema": "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0-rtm.5.json",
        "version": "2.1.0",
        "runs": [
            {
                "results": [
                    _sarif_result("SCS0006", 0, "Weak hashing function.", 22, 32, 63),
                    _sarif_result("SCS0006", 0, "Weak hashing function.", 15, 32, 63),
                    _sarif_result("SCS0005", 1, "Weak random number generator.", 37, 13, 26),
                    _sarif_result("", 2, "Hardcoded value in 'string password'.", 28, 34, 88),
                ],
                "tool": {
                    "driver": {
                        "name": "Security Code Scan",
                        "version": "5.1.1.0",
                        "rules": [
                            {
                                "id": "SCS0006",
                                "shortDescription": {"text": "Weak hashing function."},
                                "fullDescription": {
                                    "text": "SHA1 is no longer considered as a strong hashing algorithm."
                                },
                                "helpUri": "https://security-code-scan.github.io/#SCS0006",
                            },
                            {
                                "id": "SCS0005",
                                "shortDescription": {"text": "Weak random number generator."},
                                "fullDescription": {
                                    "text": "It is possible to predict the next numbers of a pseudo random generator."
                                },
                                "helpUri": "https://security-code-scan.github.io/#SCS0005",
                            },
                            {
                                "id": "SCS0015",
                                "shortDescription": {"text": "Hardcoded value in '{0}'."},
                                "fullDescription": {
                                    "text": "The secret value to this API appears to be hardcoded."
                                },
                                "helpUri": "https://security-code-scan.github.io/#SCS0015",
                            },
                        ],
                    }
                },
                "columnKind": "utf16CodeUnits",
            }
        ],
    })


@pytest.fixture
def bandit_output() -> str:
    return json.dumps({
        "errors": [],
        "results": [
            {
                "code": "5 password = 'hunter2'\n",
                "col_offset": 11,
                "end_col_offset": 20,
                "filename": "/src/app/settings.py",
                "issue_confidence": "MEDIUM",
                "issue_severity": "LOW",
                "issue_text": "Possible hardcoded password: 'hunter2'",
                "line_number": 5,
                "line_range": [5],
                "more_info": "https://bandit.readthedocs.io/en/latest/plugins/b105_hardcoded_password_string.html",
                "test_id": "B105",
                "test_name": "hardcoded_password_string",
            },
            {
                "code": "12 subprocess.call(cmd, shell=True)\n",
                "col_offset": 4,
                "filename": "./app/run.py",
                "issue_confidence": "HIGH",
                "issue_severity": "HIGH",
                "issue_text": "subprocess call with shell=True identified, security issue.",
                "line_number": 12,
                "line_range": [12, 13],
                "test_id": "B602",
                "test_name": "subprocess_popen_with_shell_equals_true",
            },
        ],
    })


@pytest.fixture
def gitleaks_output() -> str:
    return json.dumps([
        {
            "Description": "AWS Access Key",
            "StartLine": 3,
            "EndLine": 3,
            "StartColumn": 10,
            "EndColumn": 29,
            "Match": 'AWS_KEY = "AKIAIOSFODNN7REAL123"',
            "Secret": "AKIAIOSFODNN7REAL123",
            "File": "config/deploy.py",
            "RuleID": "aws-access-token",
            "Commit": "",
        },
        {
            "Description": "Generic API Key",
            "StartLine": 8,
            "EndLine": 8,
            "StartColumn": 1,
            "EndColumn": 40,
            "Match": "api_key=0123456789abcdef0123",
            "Secret": "0123456789abcdef0123",
            "File": "/src/.env",
            "RuleID": "generic-api-key",
            "Commit": "3f2c1e0d9b8a7f6e5d4c3b2a1f0e9d8c7b6a5f4e",
            "Author": "Dev",
            "Email": "dev@example.com",
            "Date": "2024-03-01T10:00:00Z",
            "Message": "add env\n",
        },
    ])


@pytest.fixture
def dotnet_project(tmp_path: Path) -> Path:
    """A project directory holding a solution file."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "test.sln").write_text("Microsoft Visual Studio Solution File\n")
    return tmp_path


@pytest.fixture
def registry() -> RuleIdRegistry:
    return RuleIdRegistry()


@pytest.fixture
def valid_rule() -> CustomRule:
    return CustomRule(
        id="HS-LEAKS-1000",
        name="test",
        description="test",
        severity="low",
        confidence="low",
        match_mode="OrMatch",
        expressions=("",),
        language="Leaks",
    )


@pytest.fixture
def write_rules(tmp_path: Path):
    """Write a list of rule mappings to a YAML (or JSON) file and return its path."""

    def _write(entries, name: str = "rules.yaml") -> Path:
        rules_dir = tmp_path / ".sastmerge-rules"
        rules_dir.mkdir(exist_ok=True)
        path = rules_dir / name
        if name.endswith(".json"):
            path.write_text(json.dumps(entries))
        else:
            path.write_text(yaml.safe_dump(entries))
        return path

    return _write


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Temporary repository: README.md committed twice (line 1 in the first commit)."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test")
    _git(repo, "config", "commit.gpgsign", "false")

    readme = repo / "README.md"
    readme.write_text("# Test\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")

    readme.write_text("# Test project\nsecond line\nthird line\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "expand readme")
    return repo
