# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Unit tests for the per-call violation collection pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field

from paramguard.registry import ParameterTarget
from paramguard.runtime import (
    build_argument_context,
    collect_violations,
    format_validation_reason,
    get_constraint_engine,
    validate_target,
)
from paramguard.validation import ValidationViolation


class TagDto(BaseModel):
    label: str = Field(min_length=2)


class RequestModel(BaseModel):
    body: dict


@dataclass
class Envelope:
    meta: dict


def _target(**overrides) -> ParameterTarget:
    values = dict(index=0, name="tags", schema=TagDto, path=None, array=None, explicit_schema=True)
    values.update(overrides)
    return ParameterTarget(**values)


def _run(target, arguments):
    context = build_argument_context(arguments)
    return validate_target(target, arguments, context, get_constraint_engine())


# ------------------------------------------------------------------
# Argument context
# ------------------------------------------------------------------


def test_context_merges_record_like_arguments_in_order():
    class Service:
        pass

    arguments = {
        "self": Service(),
        "first": {"a": 1, "shared": "first"},
        "second": RequestModel(body={"x": 1}),
        "third": Envelope(meta={"m": 2}),
        "fourth": {"shared": "fourth"},
        "count": 3,
    }

    context = build_argument_context(arguments)

    assert context == {"a": 1, "shared": "fourth", "body": {"x": 1}, "meta": {"m": 2}}


# ------------------------------------------------------------------
# Scalar mode
# ------------------------------------------------------------------


def test_scalar_candidate_passes():
    assert _run(_target(), {"tags": {"label": "ok"}}) == []


def test_scalar_candidate_fails_with_engine_rule():
    [violation] = _run(_target(), {"tags": {"label": "x"}})

    assert violation.property == "label"
    assert "string_too_short" in violation.constraints


def test_absent_path_is_reported_as_missing():
    arguments = {"request": {"other": 1}}
    target = _target(name="request", path="body.tags")

    [violation] = _run(target, arguments)

    assert violation.property == "body.tags"
    assert violation.constraints == {"isDefined": "property body.tags is missing"}
    assert violation.target == {"other": 1}


def test_none_argument_is_reported_as_missing():
    [violation] = _run(_target(), {"tags": None})

    assert violation.constraints == {"isDefined": "property tags is missing"}


# ------------------------------------------------------------------
# Array mode
# ------------------------------------------------------------------


def test_array_mode_rejects_non_sequences():
    for candidate in ({"label": "ok"}, "ok", b"ok", 5):
        [violation] = _run(_target(array=True), {"tags": candidate})
        assert violation.property == "tags"
        assert violation.target == candidate
        assert violation.constraints == {"isArray": "input param must be array"}


def test_array_mode_with_absent_path_reports_is_array():
    [violation] = _run(_target(array=True, path="body"), {"request": {}})

    assert violation.target is None
    assert "isArray" in violation.constraints


def test_array_mode_validates_every_element_in_order():
    items = ({"label": "x"}, {"label": "fine"}, "junk")

    violations = _run(_target(array=True), {"tags": items})

    assert [v.target for v in violations] == [items[0], items[2]]
    assert violations[1].property == "tags.2"


def test_empty_sequence_has_no_violations():
    assert _run(_target(array=True), {"tags": []}) == []


# ------------------------------------------------------------------
# Aggregation
# ------------------------------------------------------------------


def test_collect_violations_keeps_parameter_order():
    targets = [
        _target(index=0, name="first"),
        _target(index=1, name="second", path="body"),
        _target(index=2, name="third", array=True),
    ]
    arguments = {"first": {"label": "x"}, "second": {}, "third": "nope"}

    result = collect_violations(targets, arguments)

    assert not result.allowed
    assert [next(iter(v.constraints)) for v in result.violations] == [
        "string_too_short",
        "isDefined",
        "isArray",
    ]


def test_collect_violations_without_targets_is_allowed():
    result = collect_violations((), {"anything": 1})

    assert result.allowed
    assert result.violations == []


def test_target_without_schema_is_skipped(caplog):
    caplog.set_level(logging.WARNING, logger="paramguard.runtime.guard")

    result = collect_violations([_target(schema=None)], {"tags": {"label": "x"}})

    assert result.allowed
    assert "no schema registered" in caplog.text


def test_engine_errors_propagate():
    class ExplodingEngine:
        def validate(self, schema, candidate, *, root_property=None):
            raise RuntimeError("engine down")

    with pytest.raises(RuntimeError):
        collect_violations([_target()], {"tags": {"label": "ok"}}, ExplodingEngine())


# ------------------------------------------------------------------
# Reporting
# ------------------------------------------------------------------


def test_format_validation_reason_lists_every_rule():
    violations = [
        ValidationViolation(target={}, property="name", constraints={"isEmail": "name must be an email"}),
        ValidationViolation(target={}, property="body", constraints={"isDefined": "property body is missing"}),
    ]

    text = format_validation_reason("users.create#1", violations)

    assert text.splitlines() == [
        "Validation Error in 'users.create#1':",
        " - name: name must be an email [isEmail]",
        " - body: property body is missing [isDefined]",
    ]


def test_context_includes_plain_object_attributes():
    from types import SimpleNamespace

    class Request:
        def __init__(self):
            self.body = {"label": "ok"}
            self._secret = "hidden"

    context = build_argument_context({"request": Request(), "extra": SimpleNamespace(user="ada")})

    assert context == {"body": {"label": "ok"}, "user": "ada"}


def test_context_skips_bound_instance_only_in_first_position():
    class Service:
        def __init__(self):
            self.body = {"label": "from-service"}

    assert build_argument_context({"self": Service()}) == {}
    assert build_argument_context({"owner": Service()}) == {"body": {"label": "from-service"}}


def test_path_resolves_attribute_of_plain_object_argument():
    from types import SimpleNamespace

    target = _target(name="request", path="body")

    assert _run(target, {"request": SimpleNamespace(body={"label": "ok"})}) == []
    [violation] = _run(target, {"request": SimpleNamespace(body={"label": "x"})})
    assert violation.property == "label"


def test_inferred_schema_never_switches_to_array_mode():
    [violation] = _run(_target(explicit_schema=False), {"tags": [{"label": "ok"}]})

    assert violation.property == "tags"
    assert "isArray" not in violation.constraints


def test_explicit_schema_switches_to_array_mode_for_sequences():
    assert _run(_target(explicit_schema=True), {"tags": [{"label": "ok"}]}) == []
