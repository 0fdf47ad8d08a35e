from __future__ import annotations

import dataclasses

import pytest

from gate_loader.models.layout import (
    DEFAULT_LAYOUT,
    DEFAULT_SCALAR_OFFSETS,
    ColumnLayout,
    LayoutError,
)


def test_default_layout_blocks():
    assert DEFAULT_LAYOUT.joint_columns == range(17, 37)
    assert DEFAULT_LAYOUT.skirt_columns == range(38, 58)
    assert DEFAULT_LAYOUT.scalar_offsets["plant"] == 37
    assert DEFAULT_LAYOUT.header_width == 58
    assert DEFAULT_LAYOUT.expected_data_rows == 60
    assert DEFAULT_LAYOUT.min_row_length == 17


def test_default_layout_covers_every_column_once():
    used = set(DEFAULT_SCALAR_OFFSETS.values())
    used.update(DEFAULT_LAYOUT.joint_columns)
    used.update(DEFAULT_LAYOUT.skirt_columns)
    assert used == set(range(58))


def test_field_for_offset():
    assert DEFAULT_LAYOUT.field_for_offset(0) == "gate_id"
    assert DEFAULT_LAYOUT.field_for_offset(17) == "joint_1"
    assert DEFAULT_LAYOUT.field_for_offset(57) == "skirt_20"
    assert DEFAULT_LAYOUT.field_for_offset(99) is None


def test_overlapping_offsets_rejected():
    offsets = dict(DEFAULT_SCALAR_OFFSETS, plant=20)
    with pytest.raises(LayoutError):
        ColumnLayout(scalar_offsets=offsets)


def test_duplicate_scalar_offsets_rejected():
    offsets = dict(DEFAULT_SCALAR_OFFSETS, section_id=0)
    with pytest.raises(LayoutError):
        ColumnLayout(scalar_offsets=offsets)


def test_missing_field_rejected():
    offsets = dict(DEFAULT_SCALAR_OFFSETS)
    del offsets["status"]
    with pytest.raises(LayoutError):
        ColumnLayout(scalar_offsets=offsets)


def test_scalar_offsets_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_LAYOUT.scalar_offsets["plant"] = 1
    with pytest.raises(TypeError):
        DEFAULT_SCALAR_OFFSETS["plant"] = 1
    assert DEFAULT_LAYOUT.scalar_offsets["plant"] == 37


def test_layout_detached_from_caller_dict():
    offsets = dict(DEFAULT_SCALAR_OFFSETS)
    layout = ColumnLayout(scalar_offsets=offsets)
    offsets["plant"] = 20
    assert layout.scalar_offsets["plant"] == 37
    assert layout.field_for_offset(20) == "joint_4"


def test_replace_keeps_offsets_read_only():
    layout = dataclasses.replace(DEFAULT_LAYOUT, expected_data_rows=10)
    assert layout.scalar_offsets == DEFAULT_LAYOUT.scalar_offsets
    with pytest.raises(TypeError):
        layout.scalar_offsets["gate_id"] = 5


def test_reverse_anchor_must_be_inside_joint_block():
    with pytest.raises(LayoutError):
        ColumnLayout(reverse_anchor=20)
    with pytest.raises(LayoutError):
        ColumnLayout(reverse_anchor=-1)


def test_layout_wider_than_header_rejected():
    with pytest.raises(LayoutError):
        ColumnLayout(header_width=50)


def test_replace_revalidates():
    layout = dataclasses.replace(DEFAULT_LAYOUT, expected_data_rows=55)
    assert layout.expected_data_rows == 55
    with pytest.raises(LayoutError):
        dataclasses.replace(DEFAULT_LAYOUT, group_size=0)
