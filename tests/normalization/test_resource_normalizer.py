from __future__ import annotations

import json
from pathlib import Path

from change_graph.models import ChangeAction
from change_graph.normalization import ResourceNormalizer

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"

EXPECTATIONS: dict[str, dict[str, object]] = {
    "aws_vpc.main": {
        "module_path": [],
        "action": ChangeAction.UPDATE,
        "after": {"enable_dns_hostnames": True},
    },
    "aws_subnet.public": {
        "module_path": [],
        "action": ChangeAction.UPDATE,
        "replacement": True,
        "before": {"cidr_block": "10.0.1.0/24"},
    },
    "aws_security_group.web": {
        "module_path": [],
        "action": ChangeAction.CREATE,
    },
    "aws_instance.web": {
        "module_path": [],
        "action": ChangeAction.UPDATE,
        "after": {"instance_type": "t3.small"},
    },
    "module.app.aws_lb.this": {
        "module_path": ["app"],
        "action": ChangeAction.NOOP,
    },
    "aws_s3_bucket.logs": {
        "module_path": [],
        "action": ChangeAction.DELETE,
    },
}


def test_normalizes_resource_changes() -> None:
    plan = json.loads((FIXTURES / "network-plan.json").read_text())

    resources = ResourceNormalizer().normalize(plan)

    assert [resource.address for resource in resources] == list(EXPECTATIONS)

    for resource in resources:
        expected = EXPECTATIONS[resource.address]
        assert resource.module_path == expected["module_path"]
        assert resource.change_action is expected["action"]
        assert resource.is_replacement is expected.get("replacement", False)
        for key, value in (expected.get("before") or {}).items():
            assert resource.before is not None
            assert resource.before.get(key) == value
        for key, value in (expected.get("after") or {}).items():
            assert resource.after is not None
            assert resource.after.get(key) == value


def test_deleted_resource_has_no_after_values() -> None:
    plan = {
        "resource_changes": [
            {
                "address": "aws_s3_bucket.logs",
                "type": "aws_s3_bucket",
                "change": {"actions": ["delete"], "before": {"bucket": "x"}, "after": None},
            }
        ]
    }

    (resource,) = ResourceNormalizer().normalize(plan)

    assert resource.after is None
    assert resource.before == {"bucket": "x"}
    assert resource.is_module_root


def test_handles_missing_sections() -> None:
    normalizer = ResourceNormalizer()

    assert normalizer.normalize({}) == []
    assert normalizer.normalize(None) == []
    assert normalizer.normalize({"resource_changes": [{"address": "a.b"}]})[0].actions == ()
