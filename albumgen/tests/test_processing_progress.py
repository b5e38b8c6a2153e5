"""Tests for ProcessingProgress class."""

from albumgen.processing_progress import ProcessingProgress


class TestProcessingProgress:
    """Tests for ProcessingProgress class."""

    def test_quiet_by_default(self, capsys):
        """Test nothing is printed without show_files."""
        progress = ProcessingProgress()

        progress.on_file_processed('doors', 'a.jpg', '001', True, variant_bytes=2048)
        progress.on_file_skipped('doors', 'b.jpg', '002')
        progress.on_dry_run('doors', 'c.jpg', '003')

        assert capsys.readouterr().out == ''

    def test_show_files_ok(self, capsys):
        """Test successful files print sequence and size."""
        ProcessingProgress(show_files=True).on_file_processed(
            'doors', 'a.jpg', '001', True, variant_bytes=2048
        )

        assert capsys.readouterr().out == '  [OK] doors/001 <- a.jpg (2.0 KB)\n'

    def test_show_files_error(self, capsys):
        """Test failed files print the error."""
        ProcessingProgress(show_files=True).on_file_processed(
            'doors', 'a.jpg', '001', False, error='cannot identify image file'
        )

        assert '[ERROR] doors/001 <- a.jpg: cannot identify image file' in capsys.readouterr().out

    def test_show_files_skip_and_dry_run(self, capsys):
        """Test skip and dry-run lines."""
        progress = ProcessingProgress(show_files=True)

        progress.on_file_skipped('doors', 'b.jpg', '002')
        progress.on_dry_run('doors', 'c.jpg', '003')

        out = capsys.readouterr().out
        assert '[SKIP] doors/b.jpg -> already processed as 002' in out
        assert '[DRY RUN] doors/003 <- c.jpg (would process)' in out

    def test_format_bytes_unknown(self):
        """Test missing sizes format as unknown."""
        assert ProcessingProgress._format_bytes(None) == 'unknown'
