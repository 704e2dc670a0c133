"""Tests for the tool output normalizers and the tool run sequence."""

from pathlib import Path

import pytest

from sastmerge.config.schema import ToolConfig
from sastmerge.errors import MissingArtifactError, OutputParseError, ToolExecutionError
from sastmerge.tools import (
    CapturedOutputRunner,
    SandboxError,
    SandboxTimeout,
    available_tools,
    get_tool,
    register_tool,
    run_tool,
)
from sastmerge.tools.base import ToolNormalizer
from sastmerge.tools.scs import BUILD_FAILED_OUTPUT


class FakeRunner:
    """Sandbox double recording every invocation."""

    def __init__(self, output: str = "", error: Exception = None) -> None:
        self.output = output
        self.error = error
        self.calls = []

    def run(self, image: str, work_dir: Path) -> str:
        self.calls.append((image, work_dir))
        if self.error is not None:
            raise self.error
        return self.output


class TestRegistry:
    def test_builtin_tools_registered(self):
        assert {"bandit", "gitleaks", "scs"} <= set(available_tools())

    def test_unknown_tool(self):
        with pytest.raises(KeyError):
            get_tool("nope")

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError):
            @register_tool
            class Again(ToolNormalizer):
                name = "scs"
                image = "x"

                def parse(self, output, work_dir):
                    return []


class TestSecurityCodeScan:
    def test_four_findings_no_error(self, dotnet_project, scs_sarif_output):
        runner = FakeRunner(scs_sarif_output)
        outcome = run_tool(get_tool("scs"), runner, dotnet_project, ToolConfig())
        assert outcome.errors == []
        assert len(outcome.findings) == 4
        assert len(runner.calls) == 1

    def test_finding_fields(self, dotnet_project, scs_sarif_output):
        findings = get_tool("scs").normalize(scs_sarif_output, dotnet_project)
        first = findings[0]
        assert first.rule_id == "SCS0006"
        assert first.file == "NetCoreVulnerabilities/Vulnerabilities.cs"
        assert (first.line, first.column, first.end_line, first.end_column) == (22, 32, 22, 63)
        assert first.severity == "medium"
        assert first.message == "Weak hashing function."
        assert "SHA1" in first.details
        assert first.detected_by == "scs"

    def test_order_preserved(self, dotnet_project, scs_sarif_output):
        findings = get_tool("scs").normalize(scs_sarif_output, dotnet_project)
        assert [f.line for f in findings] == [22, 15, 37, 28]

    def test_empty_rule_id_uses_rule_index(self, dotnet_project, scs_sarif_output):
        findings = get_tool("scs").normalize(scs_sarif_output, dotnet_project)
        assert findings[3].rule_id == "SCS0015"

    def test_malformed_output(self, dotnet_project):
        outcome = run_tool(get_tool("scs"), FakeRunner("test"), dotnet_project, ToolConfig())
        assert outcome.findings == []
        assert len(outcome.errors) == 1
        assert isinstance(outcome.errors[0], OutputParseError)

    def test_not_a_sarif_log(self, dotnet_project):
        with pytest.raises(OutputParseError):
            get_tool("scs").normalize('{"runs": "nope"}', dotnet_project)

    def test_build_failure(self, dotnet_project):
        outcome = run_tool(get_tool("scs"), FakeRunner(BUILD_FAILED_OUTPUT), dotnet_project, ToolConfig())
        assert outcome.findings == []
        assert isinstance(outcome.errors[0], ToolExecutionError)

    def test_missing_solution(self, tmp_path):
        runner = FakeRunner("")
        outcome = run_tool(get_tool("scs"), runner, tmp_path, ToolConfig())
        assert outcome.findings == []
        assert isinstance(outcome.errors[0], MissingArtifactError)
        assert runner.calls == []

    def test_sandbox_error(self, dotnet_project):
        outcome = run_tool(get_tool("scs"), FakeRunner(error=RuntimeError("test")), dotnet_project, ToolConfig())
        assert outcome.findings == []
        assert isinstance(outcome.errors[0], ToolExecutionError)

    def test_sandbox_timeout(self, dotnet_project):
        outcome = run_tool(get_tool("scs"), FakeRunner(error=SandboxTimeout("600s")), dotnet_project, ToolConfig())
        assert isinstance(outcome.errors[0], ToolExecutionError)
        assert "timed out" in str(outcome.errors[0])

    def test_ignored_tool_never_runs(self, tmp_path, monkeypatch):
        tool = get_tool("scs")
        monkeypatch.setattr(tool, "check_preconditions", pytest.fail)
        runner = FakeRunner("test")
        outcome = run_tool(tool, runner, tmp_path / "missing", ToolConfig(ignore=True))
        assert outcome.findings == []
        assert outcome.errors == []
        assert outcome.skipped
        assert runner.calls == []

    def test_empty_output(self, dotnet_project):
        outcome = run_tool(get_tool("scs"), FakeRunner("  \n"), dotnet_project, ToolConfig())
        assert outcome.findings == []
        assert outcome.errors == []

    def test_empty_results(self, dotnet_project):
        findings = get_tool("scs").normalize('{"version": "2.1.0", "runs": [{"results": []}]}', dotnet_project)
        assert findings == []

    def test_image_override(self, dotnet_project):
        runner = FakeRunner('{"runs": []}')
        run_tool(get_tool("scs"), runner, dotnet_project, ToolConfig(image="mirror/scs:1"))
        assert runner.calls[0][0] == "mirror/scs:1"

    def test_locations_object_is_parse_error(self, dotnet_project):
        output = '{"runs": [{"results": [{"ruleId": "SCS0001", "locations": {"x": 1}}]}]}'
        outcome = run_tool(get_tool("scs"), FakeRunner(output), dotnet_project, ToolConfig())
        assert outcome.findings == []
        assert isinstance(outcome.errors[0], OutputParseError)

    def test_rules_mapping_is_parse_error(self, dotnet_project):
        output = (
            '{"runs": [{"tool": {"driver": {"rules": {"SCS0001": {}}}},'
            ' "results": [{"ruleId": "", "ruleIndex": 0}]}]}'
        )
        with pytest.raises(OutputParseError):
            get_tool("scs").normalize(output, dotnet_project)


class TestBandit:
    def test_parse(self, tmp_path, bandit_output):
        findings = get_tool("bandit").normalize(bandit_output, tmp_path)
        assert [f.rule_id for f in findings] == ["B105", "B602"]
        first, second = findings
        assert first.file == "app/settings.py"
        assert (first.severity, first.confidence) == ("low", "medium")
        assert (first.line, first.column, first.end_column) == (5, 11, 20)
        assert second.file == "app/run.py"
        assert second.end_line == 13
        assert (second.severity, second.confidence) == ("high", "high")

    def test_traceback_is_execution_error(self, tmp_path):
        with pytest.raises(ToolExecutionError):
            get_tool("bandit").normalize("Traceback (most recent call last):\n  boom", tmp_path)

    def test_wrong_shape(self, tmp_path):
        with pytest.raises(OutputParseError):
            get_tool("bandit").normalize("[1, 2]", tmp_path)

    def test_line_range_not_a_list(self, tmp_path):
        output = '{"results": [{"test_id": "B1", "line_range": 5}]}'
        outcome = run_tool(get_tool("bandit"), FakeRunner(output), tmp_path, ToolConfig())
        assert outcome.findings == []
        assert isinstance(outcome.errors[0], OutputParseError)


class BrokenNormalizer(ToolNormalizer):
    name = "broken"
    image = "broken:latest"

    def parse(self, output, work_dir):
        return [self.load_json(output)["missing"]]


class TestRunToolStructureErrors:
    def test_unexpected_exception_becomes_parse_error(self, tmp_path):
        outcome = run_tool(BrokenNormalizer(), FakeRunner("{}"), tmp_path, ToolConfig())
        assert outcome.findings == []
        assert len(outcome.errors) == 1
        assert isinstance(outcome.errors[0], OutputParseError)
        assert "broken" in str(outcome.errors[0])


class TestGitleaks:
    def test_parse_redacts_secret(self, tmp_path, gitleaks_output):
        findings = get_tool("gitleaks").normalize(gitleaks_output, tmp_path)
        assert len(findings) == 2
        first = findings[0]
        assert first.file == "config/deploy.py"
        assert first.severity == "critical"
        assert "AKIAIOSFODNN7REAL123" not in first.code
        assert "[REDACTED]" in first.code
        assert first.provenance is None

    def test_commit_metadata_becomes_provenance(self, tmp_path, gitleaks_output):
        second = get_tool("gitleaks").normalize(gitleaks_output, tmp_path)[1]
        assert second.file == ".env"
        assert second.provenance is not None
        assert second.provenance.author == "Dev"
        assert second.provenance.message == "add env"

    def test_null_report(self, tmp_path):
        assert get_tool("gitleaks").normalize("null", tmp_path) == []


class TestCapturedOutputRunner:
    def test_replays_file(self, tmp_path):
        out = tmp_path / "scs.sarif"
        out.write_text('{"runs": []}')
        runner = CapturedOutputRunner({"img": out})
        assert runner.run("img", tmp_path) == '{"runs": []}'
        assert runner.calls == ["img"]

    def test_unknown_image(self, tmp_path):
        with pytest.raises(SandboxError):
            CapturedOutputRunner({}).run("img", tmp_path)


class TestRelativePath:
    @pytest.mark.parametrize("uri,expected", [
        ("file:///src/a/b.cs", "a/b.cs"),
        ("/src/a/b.py", "a/b.py"),
        ("./a/b.py", "a/b.py"),
        ("a/b.py", "a/b.py"),
        ("file:///src/dir%20name/x.cs", "dir name/x.cs"),
        ("", ""),
    ])
    def test_strip(self, tmp_path, uri, expected):
        assert get_tool("scs").relative_path(uri, tmp_path) == expected

    def test_host_absolute_path(self, tmp_path):
        path = (tmp_path / "pkg" / "m.py").resolve().as_posix()
        assert get_tool("bandit").relative_path(path, tmp_path) == "pkg/m.py"
