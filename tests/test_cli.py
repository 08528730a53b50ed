import io
import json
import logging

from graph_stats.__main__ import build_config, main, parse_args


def test_main_writes_statistics(dataset, tmp_path):
    output = tmp_path / "statistics.json"
    assert main([str(dataset), str(output), "--no-progress"]) == 0

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["vertex_cardinality"][""] == 10
    assert document["edge_cardinality"][""][""][""] == 7


def test_main_reports_failure(dataset, tmp_path):
    (dataset / "static" / "person_knows_person.csv").write_text(
        ":START_ID|:END_ID\n1|2|3\n", encoding="utf-8"
    )
    output = tmp_path / "statistics.json"
    assert main([str(dataset), str(output), "--no-progress"]) == 1
    assert not output.exists()


def test_main_rejects_bad_config(dataset, tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("general:\n  unknown_key: 1\n", encoding="utf-8")
    assert main([str(dataset), str(tmp_path / "s.json"), "--config", str(config_path)]) == 1


def test_main_rejects_mistyped_config_value(dataset, tmp_path):
    config_path = tmp_path / "typed.yaml"
    config_path.write_text("stream:\n  queue_capacity: \"1024\"\n", encoding="utf-8")
    output = tmp_path / "s.json"

    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    logger = logging.getLogger("graph_stats")
    logger.addHandler(handler)
    try:
        assert main([str(dataset), str(output), "--no-progress", "--config", str(config_path)]) == 1
    finally:
        logger.removeHandler(handler)

    assert "Cannot load configuration" in buffer.getvalue()
    assert "stream.queue_capacity" in buffer.getvalue()
    assert not output.exists()


def test_main_rejects_non_positive_queue_capacity(dataset, tmp_path):
    output = tmp_path / "s.json"
    assert main([str(dataset), str(output), "--no-progress", "--queue-capacity", "0"]) == 1
    assert not output.exists()


def test_arguments_override_config_file(tmp_path):
    config_path = tmp_path / "stats.yaml"
    config_path.write_text(
        "general:\n  input_root: elsewhere\n  output_file: other.json\nstream:\n  queue_capacity: 8\n",
        encoding="utf-8",
    )
    args = parse_args(
        [str(tmp_path / "data"), str(tmp_path / "out.json"), "--config", str(config_path), "--permissive"]
    )
    config = build_config(args)
    assert config.general.input_root == str(tmp_path / "data")
    assert config.general.output_file == str(tmp_path / "out.json")
    assert config.general.strict is False
    assert config.stream.queue_capacity == 8


def test_log_file_option(dataset, tmp_path):
    log_path = tmp_path / "logs" / "run.log"
    output = tmp_path / "statistics.json"
    assert main([str(dataset), str(output), "--no-progress", "--log-file", str(log_path)]) == 0
    assert "Statistics saved to" in log_path.read_text(encoding="utf-8")
    assert not any(
        isinstance(h, logging.FileHandler) for h in logging.getLogger("graph_stats").handlers
    )
