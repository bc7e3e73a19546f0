from __future__ import annotations

import json
from pathlib import Path

from change_graph.analysis import analyze_drift
from change_graph.analysis.drift import ORPHANED_REASON, REPLACE_REASON, UPDATE_REASON
from change_graph.analysis.expressions import configuration_addresses, state_addresses
from change_graph.models import DriftEntry, DriftResult

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def _fixture_plan() -> dict:
    return json.loads((FIXTURES / "network-plan.json").read_text(encoding="utf-8"))


def test_fixture_drift() -> None:
    result = analyze_drift(_fixture_plan())

    assert result.drifted == (
        DriftEntry("aws_vpc.main", UPDATE_REASON),
        DriftEntry("aws_subnet.public", REPLACE_REASON),
        DriftEntry("aws_instance.web", UPDATE_REASON),
    )
    assert result.orphaned == (DriftEntry("aws_s3_bucket.logs", ORPHANED_REASON),)


def test_replacement_reports_replace_reason() -> None:
    plan = {
        "resource_changes": [
            {"address": "X", "change": {"actions": ["create", "delete"]}},
            {"address": "Y", "change": {"actions": ["replace"]}},
            {"address": "Z", "change": {"actions": ["create"]}},
        ]
    }

    result = analyze_drift(plan)

    assert [entry.address for entry in result.drifted] == ["X", "Y"]
    assert all(entry.reason == REPLACE_REASON for entry in result.drifted)


def test_orphaned_resource_in_prior_state() -> None:
    plan = {
        "configuration": {"root_module": {"resources": [{"address": "aws_s3_bucket.new"}]}},
        "prior_state": {
            "values": {
                "root_module": {
                    "resources": [
                        {"address": "aws_s3_bucket.old"},
                        {"address": "aws_s3_bucket.new"},
                    ]
                }
            }
        },
    }

    result = analyze_drift(plan)

    assert result.orphaned == (
        DriftEntry(
            "aws_s3_bucket.old",
            "Resource present in state but not in configuration (orphaned)",
        ),
    )


def test_module_resources_are_qualified() -> None:
    plan = {
        "configuration": {
            "root_module": {
                "module_calls": {
                    "net": {"module": {"resources": [{"address": "aws_vpc.this"}]}}
                }
            }
        },
        "prior_state": {
            "root_module": {
                "child_modules": [
                    {
                        "address": "module.net",
                        "resources": [{"address": "aws_vpc.this"}, {"address": "aws_eip.gone"}],
                    }
                ]
            }
        },
    }

    assert configuration_addresses(plan) == ["module.net.aws_vpc.this"]
    assert state_addresses(plan) == ["module.net.aws_vpc.this", "module.net.aws_eip.gone"]
    assert [entry.address for entry in analyze_drift(plan).orphaned] == [
        "module.net.aws_eip.gone"
    ]


def test_orphaned_addresses_are_in_state_and_not_configured() -> None:
    plan = _fixture_plan()
    declared = set(configuration_addresses(plan))
    recorded = set(state_addresses(plan))

    for entry in analyze_drift(plan).orphaned:
        assert entry.address in recorded
        assert entry.address not in declared


def test_cyclic_module_tree_returns_partial_result() -> None:
    module: dict = {"resources": [{"address": "aws_vpc.main"}]}
    module["module_calls"] = {"self": {"module": module}}
    plan = {
        "configuration": {"root_module": module},
        "prior_state": {"values": {"root_module": {"resources": [{"address": "aws_vpc.main"}]}}},
    }

    result = analyze_drift(plan)

    assert configuration_addresses(plan) == ["aws_vpc.main"]
    assert result.orphaned == ()


def test_missing_sections() -> None:
    assert analyze_drift({}) == DriftResult()
    assert analyze_drift(None) == DriftResult()


def test_drift_is_idempotent() -> None:
    plan = _fixture_plan()

    assert analyze_drift(plan) == analyze_drift(plan)
