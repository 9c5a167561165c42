"""Tests for the pqueue command line interface."""

import io
import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from pqueue import Queue
from pqueue.cli.main import create_parser, main


class TestCLI:
    """Run CLI commands through main() against a temp queue directory."""

    @pytest.fixture
    def queue_dir(self, tmp_path):
        queue_dir = tmp_path / "queue"
        queue_dir.mkdir()
        return queue_dir

    def test_enqueue_text_prints_id(self, queue_dir, capsys):
        assert main(['-d', str(queue_dir), 'enqueue', 'hello']) == 0
        assert main(['-d', str(queue_dir), 'enqueue', 'world']) == 0

        assert capsys.readouterr().out == "1\n2\n"
        assert (queue_dir / "1").read_text() == "hello"
        assert (queue_dir / "2").read_text() == "world"

    def test_enqueue_from_file(self, queue_dir, tmp_path):
        payload_file = tmp_path / "payload.bin"
        payload_file.write_bytes(b"\x00\x01binary\xff")

        assert main(['-d', str(queue_dir), 'enqueue', '--file', str(payload_file)]) == 0
        assert (queue_dir / "1").read_bytes() == b"\x00\x01binary\xff"

    def test_enqueue_from_stdin(self, queue_dir, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.TextIOWrapper(io.BytesIO(b"from\x00stdin")))

        assert main(['-d', str(queue_dir), 'enqueue']) == 0
        assert Queue(queue_dir).dequeue() == b"from\x00stdin"

    def test_enqueue_data_and_file_conflict(self, queue_dir, tmp_path):
        payload_file = tmp_path / "payload.txt"
        payload_file.write_text("x")

        assert main(['-d', str(queue_dir), 'enqueue', 'data', '--file', str(payload_file)]) == 2
        assert list(queue_dir.iterdir()) == []

    def test_enqueue_missing_payload_file(self, queue_dir, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            assert main(['-d', str(queue_dir), 'enqueue', '--file', str(tmp_path / "nope")]) == 1

        assert "Cannot read payload" in caplog.text
        assert list(queue_dir.iterdir()) == []

    def test_dequeue_to_stdout(self, queue_dir, capsysbinary):
        Queue(queue_dir).enqueue(b"raw\x00bytes")

        assert main(['-d', str(queue_dir), 'dequeue']) == 0
        assert capsysbinary.readouterr().out == b"raw\x00bytes"
        assert list(queue_dir.iterdir()) == []

    def test_dequeue_to_file(self, queue_dir, tmp_path):
        queue = Queue(queue_dir)
        queue.enqueue(b"first")
        queue.enqueue(b"second")
        output = tmp_path / "out" / "payload.bin"

        assert main(['-d', str(queue_dir), 'dequeue', '--output', str(output)]) == 0
        assert output.read_bytes() == b"first"
        assert Queue(queue_dir).pending_ids == [2]

    def test_dequeue_unwritable_output_keeps_entry(self, queue_dir, tmp_path, caplog):
        """An output path that cannot be opened leaves the entry queued."""
        Queue(queue_dir).enqueue(b"precious")
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("regular file")

        with caplog.at_level(logging.ERROR):
            result = main(['-d', str(queue_dir), 'dequeue', '-o', str(blocker / "out.bin")])

        assert result == 1
        assert "Cannot open output" in caplog.text
        assert (queue_dir / "1").read_bytes() == b"precious"
        assert Queue(queue_dir).dequeue() == b"precious"

    def test_dequeue_overwrites_existing_output(self, queue_dir, tmp_path):
        Queue(queue_dir).enqueue(b"new")
        output = tmp_path / "payload.bin"
        output.write_bytes(b"old contents that are longer")

        assert main(['-d', str(queue_dir), 'dequeue', '-o', str(output)]) == 0
        assert output.read_bytes() == b"new"

    def test_dequeue_empty_keeps_existing_output(self, queue_dir, tmp_path):
        output = tmp_path / "payload.bin"
        output.write_bytes(b"previous")

        assert main(['-d', str(queue_dir), 'dequeue', '-o', str(output)]) == 3
        assert output.read_bytes() == b"previous"

    def test_dequeue_empty_exit_code(self, queue_dir):
        assert main(['-d', str(queue_dir), 'dequeue']) == 3

    def test_dequeue_read_error(self, queue_dir, caplog):
        Queue(queue_dir).enqueue(b"x")

        with patch.object(Path, 'read_bytes', side_effect=PermissionError("denied")):
            with caplog.at_level(logging.ERROR):
                assert main(['-d', str(queue_dir), 'dequeue']) == 1

        assert "Cannot read entry 1" in caplog.text
        assert (queue_dir / "1").exists()

    def test_status_text(self, queue_dir, capsys):
        queue = Queue(queue_dir)
        queue.enqueue(b"a")
        queue.enqueue(b"b")

        assert main(['-d', str(queue_dir), 'status']) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [f"{queue_dir}: 2 pending", "1 2"]

    def test_status_json(self, queue_dir, capsys):
        (queue_dir / "3").write_bytes(b"")
        (queue_dir / "7").write_bytes(b"")
        (queue_dir / "README").write_text("ignored")

        assert main(['-d', str(queue_dir), 'status', '--json']) == 0

        status = json.loads(capsys.readouterr().out)
        assert status == {"directory": str(queue_dir), "pending": 2, "ids": [3, 7]}

    def test_missing_directory(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            assert main(['-d', str(tmp_path / "missing"), 'status']) == 2

        assert "Cannot list queue directory" in caplog.text

    def test_no_directory_given(self, capsys):
        assert main(['status']) == 2
        assert "no queue directory" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage: pqueue" in capsys.readouterr().out

    def test_directory_from_config(self, queue_dir, tmp_path, capsys):
        config_file = tmp_path / "pqueue.yaml"
        config_file.write_text("directory: queue\nlog_level: error\n")

        assert main(['--config', str(config_file), 'enqueue', 'configured']) == 0
        assert (queue_dir / "1").read_text() == "configured"

    def test_command_line_overrides_config(self, queue_dir, tmp_path):
        other_dir = tmp_path / "other"
        other_dir.mkdir()
        config_file = tmp_path / "pqueue.yaml"
        config_file.write_text("directory: queue\n")

        assert main(['--config', str(config_file), '-d', str(other_dir), 'enqueue', 'x']) == 0
        assert (other_dir / "1").exists()
        assert list(queue_dir.iterdir()) == []

    def test_invalid_config(self, tmp_path, capsys):
        config_file = tmp_path / "pqueue.yaml"
        config_file.write_text("colour: blue\n")

        assert main(['--config', str(config_file), 'status']) == 2
        assert "Unknown key 'colour'" in capsys.readouterr().err

    def test_debug_and_quiet_are_exclusive(self):
        parser = create_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(['--debug', '--quiet', 'status'])

        assert exc_info.value.code == 2
