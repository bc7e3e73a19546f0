from __future__ import annotations

import json
from pathlib import Path

import pytest

from change_graph.analysis import analyze_output_usage
from change_graph.analysis.output_usage import reference_matches
from change_graph.normalization import normalize_graph

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def _fixture_plan() -> dict:
    return json.loads((FIXTURES / "network-plan.json").read_text(encoding="utf-8"))


def _fixture_edges(plan: dict):
    text = (FIXTURES / "network-graph.dot").read_text(encoding="utf-8")
    return normalize_graph(text, plan).edges


@pytest.mark.parametrize(
    ("reference", "identifier", "expected"),
    [
        ("module.network", "module.network", True),
        ("module.network.vpc_id", "module.network", True),
        ("module.network", "module.network.vpc_id", True),
        ("module.network2.vpc_id", "module.network", False),
        ("var.network", "module.network", False),
    ],
)
def test_reference_matches(reference: str, identifier: str, expected: bool) -> None:
    assert reference_matches(reference, identifier) is expected


def test_module_output_consumer_is_a_direct_resource() -> None:
    plan = {
        "configuration": {
            "root_module": {
                "resources": [
                    {
                        "address": "aws_instance.web",
                        "expressions": {
                            "subnet_id": {
                                "references": ["module.network.vpc_id", "module.network"]
                            }
                        },
                    }
                ],
                "module_calls": {"network": {"source": "./network"}},
            }
        }
    }

    result = analyze_output_usage(plan, "module.network", [])

    assert result.direct_resources == ("aws_instance.web",)
    assert result.direct_modules == ()
    assert result.transitive_resources == ()


def test_fixture_usage_with_transitive_closure() -> None:
    plan = _fixture_plan()

    result = analyze_output_usage(plan, "aws_vpc.main", _fixture_edges(plan))

    assert result.direct_resources == ("aws_subnet.public", "aws_security_group.web")
    assert result.direct_modules == ()
    assert result.transitive_resources == ("aws_instance.web", "module.app.aws_lb.this")


def test_module_call_inputs_are_direct_modules() -> None:
    plan = _fixture_plan()

    result = analyze_output_usage(plan, "aws_subnet.public", _fixture_edges(plan))

    assert result.direct_modules == ("module.app",)
    assert result.direct_resources == ("aws_instance.web",)


def test_direct_and_transitive_are_disjoint() -> None:
    plan = _fixture_plan()
    edges = list(_fixture_edges(plan)) + [("aws_instance.web", "aws_subnet.public")]

    for identifier in ("aws_vpc.main", "aws_subnet.public", "var.vpc_cidr", "module.app"):
        result = analyze_output_usage(plan, identifier, edges)
        assert not set(result.direct_resources) & set(result.transitive_resources)


def test_missing_configuration_yields_empty_result() -> None:
    result = analyze_output_usage({"resource_changes": []}, "module.network", [])

    assert result.direct_modules == ()
    assert result.direct_resources == ()
    assert result.transitive_resources == ()
    assert analyze_output_usage(None, "module.network", []).identifier == "module.network"


def test_usage_is_idempotent() -> None:
    plan = _fixture_plan()
    edges = _fixture_edges(plan)

    assert analyze_output_usage(plan, "aws_vpc.main", edges) == analyze_output_usage(
        plan, "aws_vpc.main", edges
    )
