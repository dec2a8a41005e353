"""The bundled report schema is well-formed and matches what the engine emits."""

from __future__ import annotations

import json

import jsonschema
import pytest

from codecheck.contracts.load import REPORT_SCHEMA, load_schema, validate_file, validate_instance
from codecheck.model.report import REPORT_SCHEMA_VERSION, AnalysisReport
from codecheck.model.request import AnalysisRequest
from codecheck.utils.json_norm import stable_json_dumps


def test_schema_is_valid_draft_2020_12() -> None:
    schema = load_schema(REPORT_SCHEMA)
    jsonschema.Draft202012Validator.check_schema(schema)
    assert schema["properties"]["schema_version"]["const"] == REPORT_SCHEMA_VERSION


def test_unknown_schema_name() -> None:
    with pytest.raises(FileNotFoundError):
        load_schema("no_such.schema.json")


def test_engine_report_validates(engine) -> None:
    source = "class widget {};\nint main() {\n  int* p = NULL;\n  gets(0);\n}\n"
    report = engine.analyze(AnalysisRequest.build(source))
    assert report.suggestions
    assert report.security_findings
    validate_instance(report.to_dict())


def test_failure_report_validates() -> None:
    validate_instance(AnalysisReport.failure("cannot create workspace").to_dict())


def test_failure_requires_message() -> None:
    d = AnalysisReport.failure("x").to_dict()
    del d["error_message"]
    with pytest.raises(jsonschema.ValidationError):
        validate_instance(d)


def test_extra_top_level_keys_rejected() -> None:
    d = AnalysisReport(success=True).to_dict()
    d["debug"] = True
    with pytest.raises(jsonschema.ValidationError):
        validate_instance(d)


def test_bad_fingerprint_rejected(engine) -> None:
    d = engine.analyze(AnalysisRequest.build("int main() { gets(0); }\n")).to_dict()
    d["issues"][0]["fingerprint"] = "md5:abc"
    with pytest.raises(jsonschema.ValidationError):
        validate_instance(d)


def test_validate_file_round_trip(tmp_path, engine) -> None:
    report = engine.analyze(AnalysisRequest.build("int main() { return 0; }\n"))
    path = tmp_path / "report.json"
    path.write_text(stable_json_dumps(report), encoding="utf-8")
    validate_file(path)
    assert json.loads(path.read_text(encoding="utf-8"))["success"] is True
