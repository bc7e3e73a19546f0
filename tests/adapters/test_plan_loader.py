import json
from pathlib import Path

import pytest

from change_graph.adapters import PlanLoader, PlanLoaderError

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def test_load_plan_from_json_artifact(tmp_path):
    loader = PlanLoader(working_dir=tmp_path, plan_json_path=FIXTURES / "network-plan.json")

    data = loader.load_plan()

    assert data["format_version"] == "1.2"
    assert len(data["resource_changes"]) == 6


def test_load_plan_uses_default_filename(tmp_path):
    (tmp_path / "plan.json").write_text(json.dumps({"resource_changes": []}), encoding="utf-8")

    loader = PlanLoader(working_dir=tmp_path)

    assert loader.load_plan() == {"resource_changes": []}
    assert loader.workspace == str(tmp_path.resolve())


def test_load_graph_reads_dot_text(tmp_path):
    loader = PlanLoader(working_dir=tmp_path, graph_path=FIXTURES / "network-graph.dot")

    text = loader.load_graph()

    assert text.startswith("digraph {")
    assert '"[root] aws_vpc.main (expand)"' in text


def test_missing_default_graph_yields_empty_text(tmp_path):
    loader = PlanLoader(working_dir=tmp_path)

    assert loader.load_graph() == ""


def test_missing_explicit_graph_raises(tmp_path):
    loader = PlanLoader(working_dir=tmp_path, graph_path=tmp_path / "missing.dot")

    with pytest.raises(PlanLoaderError):
        loader.load_graph()


def test_missing_artifact_raises(tmp_path):
    loader = PlanLoader(working_dir=tmp_path, plan_json_path=tmp_path / "missing.json")
    with pytest.raises(PlanLoaderError):
        loader.load_plan()

    loader = PlanLoader(working_dir=tmp_path)
    with pytest.raises(PlanLoaderError):
        loader.load_provider_schemas()


def test_invalid_json_raises(tmp_path):
    plan_path = tmp_path / "plan.json"
    plan_path.write_text("{not json", encoding="utf-8")

    loader = PlanLoader(working_dir=tmp_path)

    with pytest.raises(PlanLoaderError, match="Invalid JSON"):
        loader.load_plan()


def test_non_object_plan_raises(tmp_path):
    (tmp_path / "plan.json").write_text("[]", encoding="utf-8")

    with pytest.raises(PlanLoaderError, match="JSON object"):
        PlanLoader(working_dir=tmp_path).load_plan()


def test_load_provider_schemas(tmp_path):
    loader = PlanLoader(working_dir=tmp_path, schema_path=FIXTURES / "providers-schema.json")

    data = loader.load_provider_schemas()

    assert "registry.terraform.io/hashicorp/aws" in data["provider_schemas"]
