from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

from change_graph.analysis import analyze_impact, explain_refactor_warning, explain_why_for_impact
from change_graph.analysis.explain import (
    NO_CONSUMERS,
    NO_PATH,
    NO_SUBJECT,
    find_attribute_reference,
)
from change_graph.analysis.expressions import ExpressionEntry
from change_graph.models import ImpactNode, ImpactResult, ReasonType
from change_graph.normalization import normalize_graph

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def _fixture_plan() -> dict:
    return json.loads((FIXTURES / "network-plan.json").read_text(encoding="utf-8"))


def _fixture_edges(plan: dict):
    text = (FIXTURES / "network-graph.dot").read_text(encoding="utf-8")
    return normalize_graph(text, plan).edges


def test_explains_every_impacted_node() -> None:
    plan = _fixture_plan()
    edges = _fixture_edges(plan)
    impact = analyze_impact("aws_vpc.main", edges)

    explanations = {item.subject: item for item in explain_why_for_impact(impact, plan, edges)}

    assert set(explanations) == {node.address for node in impact.all}

    subnet = explanations["aws_subnet.public"]
    assert subnet.reason_type is ReasonType.DEPENDENCY
    assert subnet.path == ("aws_vpc.main", "aws_subnet.public")
    assert subnet.explanation == (
        "Depends on aws_vpc.main via aws_subnet.public.vpc_id, which references aws_vpc.main.id"
    )

    instance = explanations["aws_instance.web"]
    assert instance.path == ("aws_vpc.main", "aws_subnet.public", "aws_instance.web")
    assert instance.explanation == (
        "Depends on aws_subnet.public via aws_instance.web.subnet_id, "
        "which references aws_subnet.public.id"
    )


def test_falls_back_to_path_when_no_attribute_reference() -> None:
    plan = _fixture_plan()
    edges = _fixture_edges(plan)
    impact = analyze_impact("aws_vpc.main", edges)

    explanations = {item.subject: item for item in explain_why_for_impact(impact, plan, edges)}
    lb = explanations["module.app.aws_lb.this"]

    assert lb.reason_type is ReasonType.DEPENDENCY
    assert lb.explanation == (
        "Dependency path: aws_vpc.main → aws_subnet.public → module.app.aws_lb.this. "
        "No attribute-level reference exposed in plan configuration."
    )


def test_unreachable_subject_is_unknown() -> None:
    impact = ImpactResult(source="A", direct=(ImpactNode(address="B", depth=1),))

    (explanation,) = explain_why_for_impact(impact, {"resource_changes": []}, [("B", "A")])

    assert explanation.reason_type is ReasonType.UNKNOWN
    assert explanation.explanation == NO_PATH
    assert explanation.path is None


def test_missing_inputs_produce_no_explanations() -> None:
    impact = analyze_impact("A", [("A", "B")])

    assert explain_why_for_impact(None, {}, []) == []
    assert explain_why_for_impact(impact, None, []) == []
    assert explain_refactor_warning(None, {}, []) == []


def test_find_attribute_reference_matches_parent_reference() -> None:
    entries = [
        ExpressionEntry("aws_instance.web", "ami", ("data.aws_ami.ubuntu.id",)),
        ExpressionEntry("aws_instance.web", "subnet_id", ("aws_subnet.public.id",)),
    ]

    assert find_attribute_reference("aws_subnet.public", "aws_instance.web", entries) == (
        "subnet_id",
        "aws_subnet.public.id",
    )
    assert find_attribute_reference("aws_vpc.main", "aws_instance.web", entries) is None


def test_refactor_warning_for_variable() -> None:
    plan = _fixture_plan()

    (explanation,) = explain_refactor_warning(
        {"subject_address": "var.vpc_cidr"}, plan, _fixture_edges(plan)
    )

    assert explanation.subject == "var.vpc_cidr"
    assert explanation.reason_type is ReasonType.VARIABLE
    assert explanation.explanation == (
        "Referenced by aws_vpc.main.cidr_block (expression reference: var.vpc_cidr)"
    )
    assert explanation.path is None


def test_refactor_warning_for_resource_includes_path() -> None:
    plan = _fixture_plan()
    warning = SimpleNamespace(target="aws_security_group.web")

    explanations = explain_refactor_warning(warning, plan, _fixture_edges(plan))

    assert len(explanations) == 2
    first = explanations[0]
    assert first.reason_type is ReasonType.DEPENDENCY
    assert first.path == ("aws_security_group.web", "aws_instance.web")
    assert first.explanation.startswith(
        "Referenced by aws_instance.web.vpc_security_group_ids "
        "(expression reference: aws_security_group.web.id)"
    )
    assert first.explanation.endswith(" via path aws_security_group.web → aws_instance.web")


def test_refactor_warning_without_subject() -> None:
    (explanation,) = explain_refactor_warning({"message": "renamed"}, {}, [])

    assert explanation.subject == "unknown"
    assert explanation.reason_type is ReasonType.UNKNOWN
    assert explanation.explanation == NO_SUBJECT


def test_refactor_warning_without_consumers() -> None:
    (explanation,) = explain_refactor_warning({"name": "output.unused"}, _fixture_plan(), [])

    assert explanation.subject == "output.unused"
    assert explanation.reason_type is ReasonType.UNKNOWN
    assert explanation.explanation == NO_CONSUMERS
