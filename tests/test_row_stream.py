import time

import pytest

from graph_stats.errors import HeaderFormatError, RecordFormatError
from graph_stats.labels import EdgeTask
from graph_stats.registry import IdentityFamily
from graph_stats.row_stream import Column, EdgeLayout, RowStream, VertexLayout, parse_header


def test_parse_header_splits_name_and_type():
    assert parse_header(["id:ID(Person)", ":LABEL", "name"]) == [
        Column("id", "ID(Person)"),
        Column("", "LABEL"),
        Column("name", ""),
    ]


def test_vertex_layout_finds_label_column():
    layout = VertexLayout.from_header(parse_header(["id:ID", "name:STRING", ":LABEL"]))
    assert layout.id_index == 0
    assert layout.label_index == 2

    plain = VertexLayout.from_header(parse_header(["id:ID", "name:STRING"]))
    assert plain.label_index is None


def test_vertex_layout_rejects_bad_headers():
    with pytest.raises(HeaderFormatError):
        VertexLayout.from_header(parse_header(["id:ID", ":LABEL", "kind:LABEL"]))
    with pytest.raises(HeaderFormatError):
        VertexLayout.from_header(parse_header(["name:STRING", "id:ID"]))
    with pytest.raises(HeaderFormatError):
        VertexLayout.from_header(parse_header(["name:STRING"]))


def test_edge_layout_marks_indirected_endpoints():
    columns = parse_header([":START_ID(Comment)", ":END_ID(Place)"])
    layout = EdgeLayout.from_header(columns, EdgeTask("Comment", "IS_LOCATED_IN", "Place"))
    assert (layout.source_index, layout.destination_index) == (0, 1)
    assert layout.source_family is None
    assert layout.destination_family is IdentityFamily.PLACE

    layout = EdgeLayout.from_header(columns, EdgeTask("Organisation", "IS_LOCATED_IN", "Place"))
    assert layout.source_family is IdentityFamily.ORGANISATION


def test_edge_layout_rejects_missing_or_misplaced_ids():
    task = EdgeTask("Person", "KNOWS", "Person")
    with pytest.raises(HeaderFormatError):
        EdgeLayout.from_header(parse_header([":START_ID", "since:LONG"]), task)
    with pytest.raises(HeaderFormatError):
        EdgeLayout.from_header(parse_header([":END_ID", ":START_ID"]), task)
    with pytest.raises(HeaderFormatError):
        EdgeLayout.from_header(parse_header([":START_ID", ":END_ID", ":END_ID"]), task)


def test_stream_preserves_record_order(tmp_path, write_csv):
    path = write_csv(tmp_path / "person_0.csv", ["id:ID", "n:INT"], [[i, i * 2] for i in range(5000)])
    with RowStream(path, capacity=4) as stream:
        assert [c.type for c in stream.header] == ["ID", "INT"]
        records = list(stream)
    assert [int(r[0]) for r in records] == list(range(5000))
    assert records[10] == ["10", "20"]


def test_full_queue_blocks_producer(tmp_path, write_csv):
    path = write_csv(tmp_path / "person_0.csv", ["id:ID"], [[i] for i in range(50)])
    with RowStream(path, capacity=3) as stream:
        time.sleep(0.3)
        assert stream._queue.qsize() == 3
        assert stream._thread.is_alive()
        assert len(list(stream)) == 50


def test_blank_lines_are_skipped(tmp_path):
    path = tmp_path / "person_0.csv"
    path.write_text("id:ID\n1\n\n2\n", encoding="utf-8")
    with RowStream(path) as stream:
        assert list(stream) == [["1"], ["2"]]


def test_malformed_record_aborts_stream(tmp_path):
    path = tmp_path / "person_0.csv"
    path.write_text("id:ID|name\n1|a\n2\n3|c\n", encoding="utf-8")
    seen = []
    with pytest.raises(RecordFormatError):
        with RowStream(path) as stream:
            for record in stream:
                seen.append(record)
    assert seen == [["1", "a"]]


def test_missing_header_is_fatal(tmp_path):
    path = tmp_path / "person_0.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(HeaderFormatError):
        with RowStream(path):
            pass


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        with RowStream(tmp_path / "absent_0.csv"):
            pass


def test_leaving_early_stops_blocked_producer(tmp_path, write_csv):
    path = write_csv(tmp_path / "person_0.csv", ["id:ID"], [[i] for i in range(1000)])
    stream = RowStream(path, capacity=1)
    with stream:
        for record in stream:
            assert record == ["0"]
            break
    assert stream._thread is None
    assert stream._handle is None


def test_stream_requires_context(tmp_path, write_csv):
    path = write_csv(tmp_path / "person_0.csv", ["id:ID"], [[1]])
    with pytest.raises(RuntimeError):
        list(RowStream(path))


@pytest.mark.parametrize("capacity", [0, -5, None])
def test_capacity_must_be_positive(tmp_path, capacity):
    with pytest.raises(ValueError):
        RowStream(tmp_path / "person_0.csv", capacity=capacity)
