"""Tests for CLI commands."""

import base64

import pytest
from click.testing import CliRunner

from imgstash.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "images.db")


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "upload" in result.output
        assert "fetch" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestUploadCommand:
    def test_prints_key(self, runner, db_path, sample_image_file):
        result = runner.invoke(cli, ["upload", str(sample_image_file), "--db", db_path])
        assert result.exit_code == 0
        key = result.stdout.strip()
        assert len(key) == 50
        assert key.isalnum()

    def test_missing_file(self, runner, db_path):
        result = runner.invoke(cli, ["upload", "nonexistent.png", "--db", db_path])
        assert result.exit_code != 0

    def test_not_an_image(self, runner, db_path, tmp_path):
        path = tmp_path / "fake.png"
        path.write_bytes(b"plain text pretending to be a png")
        result = runner.invoke(cli, ["upload", str(path), "--db", db_path])
        assert result.exit_code == 1
        assert result.stdout.strip() == ""


class TestFetchCommand:
    def _upload(self, runner, db_path, image_path) -> str:
        result = runner.invoke(cli, ["upload", str(image_path), "--db", db_path])
        assert result.exit_code == 0
        return result.stdout.strip()

    def test_base64_round_trip(self, runner, db_path, sample_image_file):
        key = self._upload(runner, db_path, sample_image_file)
        result = runner.invoke(cli, ["fetch", key, "--db", db_path, "--base64"])
        assert result.exit_code == 0
        assert base64.b64decode(result.stdout.strip())[:2] == b"\xff\xd8"

    def test_output_file(self, runner, db_path, sample_image_file, tmp_path):
        key = self._upload(runner, db_path, sample_image_file)
        out = tmp_path / "out.jpg"
        result = runner.invoke(cli, ["fetch", key, "--db", db_path, "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_bytes()[:2] == b"\xff\xd8"

    def test_raw_stdout(self, runner, db_path, sample_image_file):
        key = self._upload(runner, db_path, sample_image_file)
        result = runner.invoke(cli, ["fetch", key, "--db", db_path])
        assert result.exit_code == 0
        assert result.stdout_bytes[:2] == b"\xff\xd8"

    def test_unknown_key(self, runner, db_path):
        result = runner.invoke(cli, ["fetch", "nonexistent-key", "--db", db_path])
        assert result.exit_code == 1
        assert result.stdout_bytes == b""

    def test_expired_key(self, runner, db_path, sample_image_file):
        result = runner.invoke(
            cli, ["upload", str(sample_image_file), "--db", db_path, "--ttl", "0"]
        )
        key = result.stdout.strip()
        result = runner.invoke(cli, ["fetch", key, "--db", db_path])
        assert result.exit_code == 1


class TestUnopenableStore:
    @pytest.fixture
    def corrupt_db(self, tmp_path):
        path = tmp_path / "corrupt.db"
        path.write_bytes(b"this is not a sqlite database" * 10)
        return str(path)

    def test_fetch_reports_not_found(self, runner, corrupt_db):
        result = runner.invoke(cli, ["fetch", "somekey", "--db", corrupt_db])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert result.stdout_bytes == b""

    def test_upload_fails_cleanly(self, runner, corrupt_db, sample_image_file):
        result = runner.invoke(cli, ["upload", str(sample_image_file), "--db", corrupt_db])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert result.stdout.strip() == ""


class TestConfigCommand:
    def test_shows_table(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "Configuration" in result.output
        assert "ttl_seconds" in result.output
