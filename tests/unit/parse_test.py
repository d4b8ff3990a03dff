"""Unit tests for the structural parser."""

import io

import pytest
from factories import SQUARE_DISK, TWO_RING_BODY, UNIT_DISK_INFO, model_bytes, model_lines, tokens

from lathe_mesh.config import Settings
from lathe_mesh.core.parse import (
    find_parse_start,
    parse_body,
    parse_disk_info,
    parse_disks,
    parse_model,
    parse_tables,
)
from lathe_mesh.errors import ParseFailure, ParseStage
from lathe_mesh.models import BinaryItem, DiskVertex, EmptyItem, FloatItem, IntItem, TagItem


class TestFindParseStart:
    def test_starts_after_last_tag(self) -> None:
        items = [TagItem(value="A"), IntItem(value=1), TagItem(value="B"), IntItem(value=2), FloatItem(value=1.0)]
        assert find_parse_start(items) == 3

    def test_tag_followed_by_single_item(self) -> None:
        assert find_parse_start([TagItem(value="A"), IntItem(value=1)]) == 1

    def test_no_tag_starts_at_zero(self) -> None:
        assert find_parse_start(tokens(1, 2, 3)) == 0

    def test_empty_list(self) -> None:
        assert find_parse_start([]) == 0

    def test_trailing_tag_points_at_last_item(self) -> None:
        items = [IntItem(value=1), TagItem(value="END"), BinaryItem(value=b"\xff")]
        assert find_parse_start(items) == 2


class TestParseDisks:
    def test_single_disk_of_two_vertices(self) -> None:
        items = tokens(1, 1, 2, 0.0, 0.0, 0.0, 0, 1.0, 0.0, 0.0, 1)

        disks, next_idx = parse_disks(items, 0)

        assert next_idx == 11
        assert len(disks) == 1
        assert disks[0] == (
            DiskVertex(position=(0.0, 0.0, 0.0), tag=0),
            DiskVertex(position=(1.0, 0.0, 0.0), tag=1),
        )

    def test_multiple_disks_in_group(self) -> None:
        items = tokens(2, 1, 0.0, 0.0, 0.0, 0, 1, 0.0, 0.0, 5.0, 3)

        disks, next_idx = parse_disks(items, 0)

        assert next_idx == len(items)
        assert [d[0].position for d in disks] == [(0.0, 0.0, 0.0), (0.0, 0.0, 5.0)]
        assert disks[1][0].tag == 3

    def test_vertex_count_mismatch_fails(self) -> None:
        items = tokens(2, 1, 0.0, 0.0, 0.0, 0, 2, 0.0, 0.0, 0.0, 0, 1.0, 1.0, 1.0, 0)

        with pytest.raises(ParseFailure) as exc_info:
            parse_disks(items, 0)

        assert exc_info.value.stage is ParseStage.DISKS

    def test_broken_group_is_discarded(self) -> None:
        items = tokens(2, 1, 0.0, 0.0, 0.0, 0, 3, 1, 1, 5.0, 0.0, 0.0, 3)

        disks, next_idx = parse_disks(items, 0)

        assert next_idx == 13
        assert len(disks) == 1
        assert disks[0] == (DiskVertex(position=(5.0, 0.0, 0.0), tag=3),)

    def test_skips_items_that_are_not_positive_counts(self) -> None:
        items = [EmptyItem(), FloatItem(value=2.0), *tokens(0, -3, 1, 1, 0.5, 0.5, 0.5, 9)]

        disks, next_idx = parse_disks(items, 0)

        assert next_idx == len(items)
        assert disks[0][0].tag == 9

    def test_zero_vertex_disk_fails(self) -> None:
        with pytest.raises(ParseFailure):
            parse_disks(tokens(1, 0), 0)

    def test_no_group_fails(self) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            parse_disks([TagItem(value="x"), EmptyItem()], 0)

        assert str(exc_info.value).startswith("Parse failure: disks")


class TestParseBody:
    def test_reads_rows_in_field_order(self) -> None:
        items = tokens(1, 3, 2, 45.0, 7, -1, 4)

        body, next_idx = parse_body(items, 0)

        assert next_idx == 7
        row = body[0]
        assert (row.disk_info_index, row.action, row.value, row.color, row.left, row.right) == (3, 2, 45.0, 7, -1, 4)

    def test_negative_count_is_followed_by_float_and_real_count(self) -> None:
        items = tokens(-1, 0.5, 2, 0, 0, 0.0, 1, 1, -1, 0, 0, 10.0, 1, -1, -1)

        body, next_idx = parse_body(items, 0)

        assert next_idx == len(items)
        assert [row.value for row in body] == [0.0, 10.0]

    def test_negative_replacement_count_fails(self) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            parse_body(tokens(-1, 0.5, -2), 0)

        assert exc_info.value.stage is ParseStage.BODY

    def test_negative_count_without_float_fails(self) -> None:
        with pytest.raises(ParseFailure):
            parse_body(tokens(-1, 2), 0)

    def test_zero_count(self) -> None:
        assert parse_body(tokens(0, 5), 0) == ([], 1)

    def test_wrong_field_type_fails_with_line(self) -> None:
        items = tokens(1, 0, 0, 1, 1, -1, -1)  # value should be a float

        with pytest.raises(ParseFailure) as exc_info:
            parse_body(items, 0)

        assert exc_info.value.stage is ParseStage.BODY
        assert exc_info.value.line == 4

    def test_truncated_table_fails(self) -> None:
        with pytest.raises(ParseFailure):
            parse_body(tokens(2, 0, 0, 0.0, 1, -1, -1), 0)


class TestParseDiskInfo:
    def test_reads_interleaved_arrays(self) -> None:
        items = tokens(1, 1.0, 2.0, 3.0, 4.0, 0, 11, 5, 0.5, 1.5, 0.25, 1.25, 0.125, 1.125, 2.0, 3.0)

        records, next_idx = parse_disk_info(items, 0)

        assert next_idx == len(items)
        record = records[0]
        assert record.shift == (1.0, 2.0)
        assert record.scale == (3.0, 4.0)
        assert (record.disk_index, record.id, record.flags) == (0, 11, 5)
        assert record.arr1 == (0.5, 0.25, 0.125, 2.0)
        assert record.arr2 == (1.5, 1.25, 1.125, 3.0)

    def test_non_positive_count_yields_nothing(self) -> None:
        assert parse_disk_info(tokens(-4), 0) == ([], 1)

    def test_missing_count_fails(self) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            parse_disk_info([BinaryItem(value=b"\xff")], 0)

        assert exc_info.value.stage is ParseStage.DISK_INFO

    def test_short_record_fails(self) -> None:
        with pytest.raises(ParseFailure):
            parse_disk_info(tokens(1, 1.0, 2.0, 3.0, 4.0, 0, 11, 5, 0.5), 0)


class TestParseTables:
    def test_parses_all_three_stages(self) -> None:
        items = [TagItem(value="BODY"), *tokens(1, 1, 1.0, 2.0, 3.0, 4, 1, 0, 0, 0.0, -1, -1, -1, 0)]

        tables = parse_tables(items)

        assert len(tables.disks) == 1
        assert len(tables.body) == 1
        assert tables.disk_info == ()

    def test_header_skip(self) -> None:
        header = tokens(1, 1, 9.0, 9.0, 9.0, 9)
        data = tokens(1, 1, 1.0, 2.0, 3.0, 4, 0, 0)
        items = [TagItem(value="BODY"), *header, *data]

        with pytest.raises(ParseFailure):
            parse_tables(items)
        assert parse_tables(items, header_skip=6).disks[0][0].tag == 4

    def test_body_failure_names_stage(self) -> None:
        items = [TagItem(value="BODY"), *tokens(1, 1, 1.0, 2.0, 3.0, 4, 1.0)]

        with pytest.raises(ParseFailure) as exc_info:
            parse_tables(items)

        assert exc_info.value.stage is ParseStage.BODY
        assert exc_info.value.line == 8


class TestParseModel:
    def test_parses_model_file(self, two_ring_bytes: bytes) -> None:
        model = parse_model(io.BytesIO(two_ring_bytes))

        assert model.disk_size == 4
        assert model.body is not None
        assert model.body.left is not None
        assert model.body.left.value == 10.0
        assert model.disk_info[0].arr1 == (0.5, 0.25, 0.125, 2.0)

    def test_lf_only_file(self) -> None:
        data = model_bytes(model_lines([SQUARE_DISK], TWO_RING_BODY, UNIT_DISK_INFO), newline="\n")

        model = parse_model(io.BytesIO(data))

        assert model.stats().body_segment_count == 2

    def test_empty_file_fails_on_disks(self) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            parse_model(io.BytesIO(b""))

        assert exc_info.value.stage is ParseStage.DISKS

    def test_missing_disk_info_fails(self) -> None:
        lines = model_lines([SQUARE_DISK], TWO_RING_BODY, [])[:-1]

        with pytest.raises(ParseFailure) as exc_info:
            parse_model(io.BytesIO(model_bytes(lines)), Settings())

        assert exc_info.value.stage is ParseStage.DISK_INFO
