"""Tests for main.py CLI functionality."""

from unittest.mock import patch

import pytest

from note_images.main import build_parser, load_options, main
from note_images.testing.fakes import create_noisy_image, create_test_image


def run_main(argv):
    with patch("sys.argv", ["note-images", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            main()
    return exc_info.value.code


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_main_with_no_args_shows_help(self):
        """Test that running main without arguments shows help."""
        with patch("sys.argv", ["note-images"]):
            with patch("argparse.ArgumentParser.print_help") as mock_help:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_help.assert_called_once()
                    mock_exit.assert_called_once_with(1)

    def test_main_version_command(self):
        """Test version command output."""
        with patch("sys.argv", ["note-images", "version"]):
            with patch("builtins.print") as mock_print:
                with patch("sys.exit") as mock_exit:
                    main()
                    mock_print.assert_any_call("Note Images CLI")
                    mock_print.assert_any_call("Version 0.1.0")
                    mock_exit.assert_called_once_with(0)

    def test_detect_command(self, tmp_path, capsys):
        """Test detect prints the sniffed format."""
        image = tmp_path / "upload.bin"
        image.write_bytes(create_test_image(10, 10, format="GIF"))

        assert run_main(["detect", str(image)]) == 0
        assert "upload.bin: gif (image/gif)" in capsys.readouterr().out

    def test_detect_command_unknown(self, tmp_path, capsys):
        """Test detect fails for unrecognized or unreadable files."""
        text = tmp_path / "notes.txt"
        text.write_text("hello")

        assert run_main(["detect", str(text), str(tmp_path / "missing")]) == 1
        output = capsys.readouterr().out
        assert "notes.txt: unknown" in output
        assert "missing: error" in output

    def test_shrink_command(self, tmp_path, capsys):
        """Test shrink writes the re-encoded file."""
        source = tmp_path / "photo.png"
        source.write_bytes(create_noisy_image(400, 200, format="PNG"))
        out_dir = tmp_path / "out"

        code = run_main(
            ["shrink", str(source), "--out-dir", str(out_dir), "--max-dimension", "100"]
        )

        assert code == 0
        assert (out_dir / "photo.jpeg").exists()
        assert "photo.jpeg" in capsys.readouterr().out

    def test_shrink_command_with_failures(self, tmp_path, capsys):
        """Test shrink exits non-zero when a file fails."""
        source = tmp_path / "broken.jpg"
        source.write_bytes(b"\xff\xd8\xff\xe0 truncated")

        code = run_main(
            ["shrink", str(source), "--out-dir", str(tmp_path / "out"), "--processor", "multithread"]
        )

        assert code == 1
        assert "FAILED" in capsys.readouterr().out

    def test_shrink_command_invalid_options(self, tmp_path):
        """Test out-of-range options are rejected."""
        source = tmp_path / "photo.png"
        source.write_bytes(create_test_image(10, 10, format="PNG"))

        code = run_main(
            ["shrink", str(source), "--out-dir", str(tmp_path), "--jpeg-quality", "500"]
        )

        assert code == 1


class TestLoadOptions:
    def test_cli_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("NOTE_IMAGES_IMAGE_MAX_WIDTH_HEIGHT", "640")
        monkeypatch.setenv("NOTE_IMAGES_IMAGE_JPEG_QUALITY", "70")
        args = build_parser().parse_args(["shrink", "a.jpg", "--out-dir", "out", "--jpeg-quality", "90"])

        options = load_options(args)

        assert options.max_width_height == 640
        assert options.jpeg_quality == 90

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NOTE_IMAGES_IMAGE_MAX_WIDTH_HEIGHT", raising=False)
        monkeypatch.delenv("NOTE_IMAGES_IMAGE_JPEG_QUALITY", raising=False)
        args = build_parser().parse_args(["shrink", "a.jpg", "--out-dir", "out"])

        options = load_options(args)

        assert options.max_width_height == 1200
        assert options.jpeg_quality == 80
