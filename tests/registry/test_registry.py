# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Unit tests for the parameter target registry."""

from __future__ import annotations

import threading

from pydantic import BaseModel

from paramguard import ParameterRegistry, ParameterTarget, Validator, get_registry


class ItemDto(BaseModel):
    sku: str


class OtherDto(BaseModel):
    code: int


def test_lookup_of_unknown_callable_is_empty(registry):
    assert registry.lookup("nothing") == ()
    assert "nothing" not in registry


def test_lookup_is_ordered_by_parameter_index(registry):
    registry.register("svc.call", 2, Validator(ItemDto), name="c")
    registry.register("svc.call", 0, Validator(ItemDto), name="a")
    registry.register("svc.call", 1, Validator(ItemDto), name="b")

    assert [t.index for t in registry.lookup("svc.call")] == [0, 1, 2]


def test_last_registration_wins(registry):
    registry.register("svc.call", 0, Validator(ItemDto))
    registry.register("svc.call", 0, Validator(OtherDto, "body"))

    [target] = registry.lookup("svc.call")
    assert target.schema is OtherDto
    assert target.path == "body"


def test_explicit_options_win_over_inferred_values(registry):
    target = registry.register(
        "svc.call",
        0,
        Validator(ItemDto, each=False),
        name="items",
        schema=OtherDto,
        array=True,
    )

    assert target == ParameterTarget(
        index=0, name="items", schema=ItemDto, path=None, array=False, explicit_schema=True
    )


def test_inferred_values_fill_in_missing_options(registry):
    target = registry.register("svc.call", 1, Validator(), name="items", schema=ItemDto, array=True)

    assert target.schema is ItemDto
    assert target.array is True
    assert target.explicit_schema is False


def test_name_defaults_to_index(registry):
    target = registry.register("svc.call", 3, Validator(ItemDto))

    assert target.name == "3"
    assert target.label == "3"


def test_label_prefers_path(registry):
    target = registry.register("svc.call", 0, Validator(ItemDto, "body.item"), name="req")

    assert target.label == "body.item"


def test_forget_drops_all_descriptors(registry):
    registry.register("svc.call", 0, Validator(ItemDto))
    registry.forget("svc.call")

    assert registry.lookup("svc.call") == ()
    registry.forget("svc.call")  # idempotent


def test_new_callable_ids_are_unique(registry):
    def handler():
        return None

    first = registry.new_callable_id(handler)
    second = registry.new_callable_id(handler)

    assert first != second
    assert first.startswith(f"{__name__}.test_new_callable_ids_are_unique.<locals>.handler#")


def test_default_registry_is_shared():
    assert get_registry() is get_registry()
    assert isinstance(get_registry(), ParameterRegistry)


def test_concurrent_registration_and_lookup(registry):
    """Readers only ever see complete descriptors while writers register."""
    errors = []

    def writer(offset):
        for index in range(50):
            registry.register("svc.bulk", offset * 50 + index, Validator(ItemDto))

    def reader():
        for _ in range(200):
            targets = registry.lookup("svc.bulk")
            indexes = [t.index for t in targets]
            if indexes != sorted(indexes):
                errors.append(indexes)

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(registry.lookup("svc.bulk")) == 200
