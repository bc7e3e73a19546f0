from __future__ import annotations

import json
from pathlib import Path

from change_graph.analysis.expressions import (
    MODULE_CALL,
    OUTPUT,
    RESOURCE,
    ExpressionEntry,
    build_expression_index,
    collect_references,
    iter_configuration_modules,
)

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def test_collect_references_flattens_nested_blocks() -> None:
    expression = {
        "references": ["var.a"],
        "ingress": [
            {"cidr_blocks": {"references": ["var.cidrs", "var.a"]}},
            {"from_port": {"constant_value": 443}},
        ],
    }

    assert collect_references(expression) == ("var.a", "var.cidrs")
    assert collect_references({"constant_value": {"references": ["ignored"]}}) == ()
    assert collect_references(None) == ()


def test_index_covers_resources_outputs_and_module_inputs() -> None:
    plan = json.loads((FIXTURES / "network-plan.json").read_text(encoding="utf-8"))

    entries = build_expression_index(plan)

    assert ExpressionEntry(
        "aws_subnet.public", "vpc_id", ("aws_vpc.main.id", "aws_vpc.main"), RESOURCE
    ) in entries
    assert ExpressionEntry(
        "output.vpc_id", "value", ("aws_vpc.main.id", "aws_vpc.main"), OUTPUT
    ) in entries
    assert ExpressionEntry(
        "module.app", "subnet_id", ("aws_subnet.public.id", "aws_subnet.public"), MODULE_CALL
    ) in entries
    assert ExpressionEntry(
        "module.app.aws_lb.this", "subnets", ("var.subnet_id",), RESOURCE
    ) in entries


def test_nested_module_prefixes() -> None:
    plan = {
        "configuration": {
            "root_module": {
                "module_calls": {
                    "outer": {
                        "module": {
                            "module_calls": {
                                "inner": {
                                    "module": {"resources": [{"address": "null_resource.x"}]}
                                }
                            }
                        }
                    }
                }
            }
        }
    }

    prefixes = [prefix for prefix, _module in iter_configuration_modules(plan)]

    assert prefixes == ["", "module.outer", "module.outer.module.inner"]


def test_missing_configuration_is_empty() -> None:
    assert build_expression_index({}) == ()
    assert build_expression_index(None) == ()
