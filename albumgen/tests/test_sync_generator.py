"""Tests for AlbumSyncGenerator class."""

import json
import stat

import pytest

from albumgen.run_log import RunStatus, SyncLog
from albumgen.sync_generator import AlbumSyncGenerator, list_generated_albums


@pytest.fixture
def generated_tree(config):
    """Fixture providing generated album directories doors and mystery."""
    root = config.generated_path
    (root / 'mystery').mkdir(parents=True)
    (root / 'doors').mkdir(parents=True)
    (root / 'stray.json').write_text('{}')
    return root


class TestListGeneratedAlbums:
    """Tests for album discovery."""

    def test_only_directories_sorted(self, generated_tree):
        """Test files are ignored and slugs are sorted."""
        assert list_generated_albums(generated_tree) == ['doors', 'mystery']


class TestAlbumSyncGenerator:
    """Tests for AlbumSyncGenerator class."""

    def test_known_and_fallback_titles(self, config, generated_tree, logger):
        """Test doors uses its known title and mystery falls back."""
        log = AlbumSyncGenerator(config, logger=logger).run()

        sql_files = list(config.db_sync_path.glob('sync_*.sql'))
        assert len(sql_files) == 1
        assert sql_files[0].read_text().splitlines() == [
            "INSERT OR IGNORE INTO albums (slug, title, description) VALUES "
            "('doors', 'Doors & Windows', 'Unique doors and windows from around the world.');",
            "INSERT OR IGNORE INTO albums (slug, title, description) VALUES "
            "('mystery', 'Mystery', '');",
        ]
        assert log.status == RunStatus.SUCCESS
        assert log.total_rows == 2
        assert log.successful_inserts == 2
        assert log.failed_inserts == 0

    def test_script_written_executable(self, config, generated_tree, logger):
        """Test sync-db.sh holds one wrangler command per album and is executable."""
        AlbumSyncGenerator(config, logger=logger).run()

        script = config.sync_script_path
        content = script.read_text()
        assert content.startswith('#!/bin/bash\n# Database sync script - ')
        commands = [line for line in content.splitlines() if line.startswith('npx wrangler')]
        assert len(commands) == 2
        assert all(c.startswith('npx wrangler d1 execute "portfolio-db" --command "') for c in commands)
        assert 'Database sync completed' in content
        assert stat.S_IMODE(script.stat().st_mode) == 0o755

    def test_artifacts_share_run_timestamp(self, config, generated_tree, logger):
        """Test the SQL file, script header and log use one timestamp."""
        log = AlbumSyncGenerator(config, logger=logger).run()

        stamp = log.path.stem[len('sync_'):]
        assert (config.db_sync_path / f"sync_{stamp}.sql").exists()
        assert f"# Database sync script - {stamp}" in config.sync_script_path.read_text()

    def test_db_name_from_config(self, config, generated_tree, logger):
        """Test the configured database name is used."""
        config.db_name = 'staging-db'

        AlbumSyncGenerator(config, logger=logger).run()

        assert 'd1 execute "staging-db"' in config.sync_script_path.read_text()

    def test_run_log_saved(self, config, generated_tree, logger):
        """Test the sync log is saved with counts."""
        log = AlbumSyncGenerator(config, logger=logger).run()

        assert log.path.parent == config.sync_log_path
        data = json.loads(log.path.read_text())
        assert data['status'] == 'SUCCESS'
        assert data['total_rows'] == 2
        assert data['successful_inserts'] == 2
        assert data['errors'] == []

    def test_untrusted_slug_is_escaped(self, config, logger):
        """Test quotes and shell metacharacters in slugs stay inside literals."""
        (config.generated_path / "o'hare $(rm -rf)").mkdir(parents=True)

        AlbumSyncGenerator(config, logger=logger).run()

        sql = next(config.db_sync_path.glob('sync_*.sql')).read_text()
        assert "VALUES ('o''hare $(rm -rf)', 'O''hare $(rm -rf)', '');" in sql
        assert "\\$(rm -rf)" in config.sync_script_path.read_text()

    def test_missing_generated_root(self, config, logger):
        """Test a missing generated root fails before writing artifacts."""
        log = AlbumSyncGenerator(config, logger=logger).run()

        assert log.status == RunStatus.FAILED
        assert len(log.errors) == 1
        assert not config.sync_script_path.exists()
        assert not config.db_sync_path.exists()
        saved = list(config.sync_log_path.glob('sync_*.json'))
        assert len(saved) == 1
        assert json.loads(saved[0].read_text())['status'] == 'FAILED'

    def test_unwritable_script_fails_with_log(self, config, generated_tree, logger):
        """Test a script path that cannot be written ends FAILED and the log is saved."""
        config.sync_script = 'blocked'
        config.sync_script_path.mkdir(parents=True)

        log = AlbumSyncGenerator(config, logger=logger).run()

        assert log.status == RunStatus.FAILED
        assert any('Failed to write sync artifacts' in e for e in log.errors)
        assert not (config.sync_script_path.parent / 'blocked.part').exists()
        saved = list(config.sync_log_path.glob('sync_*.json'))
        assert len(saved) == 1
        assert json.loads(saved[0].read_text())['status'] == 'FAILED'

    def test_no_albums(self, config, logger):
        """Test an empty generated root reports NO_CHANGES and writes no artifacts."""
        config.generated_path.mkdir(parents=True)

        log = AlbumSyncGenerator(config, logger=logger).run()

        assert log.status == RunStatus.NO_CHANGES
        assert log.succeeded is True
        assert not config.sync_script_path.exists()
        assert not config.db_sync_path.exists()
        assert json.loads(log.path.read_text())['status'] == 'NO_CHANGES'

    def test_build_statements_records_failures(self, config, logger):
        """Test a slug that cannot be quoted is counted as failed."""
        log = SyncLog()

        statements = AlbumSyncGenerator(config, logger=logger).build_statements(
            ['doors', 'bad\x00slug'], log
        )

        assert len(statements) == 1
        assert log.total_rows == 1
        assert log.failed_inserts == 1
        assert len(log.errors) == 1

    def test_dry_run(self, config, generated_tree, logger, capsys):
        """Test dry run prints SQL and writes nothing."""
        log = AlbumSyncGenerator(config, dry_run=True, logger=logger).run()

        out = capsys.readouterr().out
        assert "('doors', 'Doors & Windows'" in out
        assert log.successful_inserts == 2
        assert not config.sync_script_path.exists()
        assert not config.db_sync_path.exists()
        assert not config.sync_log_path.exists()
