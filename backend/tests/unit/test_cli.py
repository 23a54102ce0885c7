"""Tests for the administrative CLI."""

import pytest

from patient_registry import cli


class TestParser:
    """Test argument parsing and dispatch."""

    def test_version_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["version"])

        assert exc_info.value.code == 0
        assert "Version:" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 0
        assert "purge-demo" in capsys.readouterr().out

    def test_purge_defaults_to_dry_run(self):
        args = cli.build_parser().parse_args(["purge-demo"])
        assert args.apply is False
        assert args.func is cli.cmd_purge_demo

    def test_unknown_command(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["drop-everything"])
        assert exc_info.value.code == 2


class TestDatabaseCommands:
    """Test the engine-bound command bodies."""

    @pytest.mark.asyncio
    async def test_check_database(self, db_engine, capsys):
        assert await cli.check_database(db_engine) is True
        assert "SUCCESS" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_init_database_is_repeatable(self, db_engine):
        assert await cli.init_database(db_engine) is True
        assert await cli.init_database(db_engine) is True

    @pytest.mark.asyncio
    async def test_seed_then_purge(self, db_engine, capsys):
        assert await cli.seed_demo(db_engine) is True
        assert await cli.purge_demo(db_engine, apply=False) is True
        assert "[dry-run] Demo patients matched: 3" in capsys.readouterr().out

        assert await cli.purge_demo(db_engine, apply=True) is True
        assert "Deleted 3 demo patient record(s)" in capsys.readouterr().out

        assert await cli.purge_demo(db_engine, apply=False) is True
        assert "matched: 0" in capsys.readouterr().out
