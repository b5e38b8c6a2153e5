"""Tests for album statements and quoting."""

import pytest

from albumgen.statements import (
    AlbumStatement,
    default_title,
    quote_shell_double,
    quote_sql_literal,
    wrangler_command,
)


class TestQuoteSqlLiteral:
    """Tests for SQL literal quoting."""

    def test_plain(self):
        """Test plain values are single-quoted."""
        assert quote_sql_literal('doors') == "'doors'"

    def test_single_quotes_doubled(self):
        """Test embedded quotes cannot terminate the literal."""
        assert quote_sql_literal("o'hare'); DROP TABLE albums; --") == \
            "'o''hare''); DROP TABLE albums; --'"

    def test_nul_rejected(self):
        """Test NUL characters raise ValueError."""
        with pytest.raises(ValueError):
            quote_sql_literal('bad\x00slug')


class TestQuoteShellDouble:
    """Tests for shell quoting."""

    def test_plain(self):
        """Test plain values are double-quoted."""
        assert quote_shell_double('portfolio-db') == '"portfolio-db"'

    def test_specials_escaped(self):
        """Test backslash, double quote, dollar and backtick are escaped."""
        assert quote_shell_double('a"b$c`d\\e') == '"a\\"b\\$c\\`d\\\\e"'

    def test_single_quotes_untouched(self):
        """Test single quotes need no escaping inside double quotes."""
        assert quote_shell_double("it's") == '"it\'s"'


class TestAlbumStatement:
    """Tests for AlbumStatement class."""

    def test_known_album(self):
        """Test known slugs use the album table."""
        statement = AlbumStatement.for_slug('doors')

        assert statement.title == 'Doors & Windows'
        assert statement.description == 'Unique doors and windows from around the world.'

    def test_unknown_album(self):
        """Test unknown slugs fall back to a capitalized slug."""
        statement = AlbumStatement.for_slug('mystery')

        assert statement.title == 'Mystery'
        assert statement.description == ''

    def test_default_title(self):
        """Test only the first character is upper-cased."""
        assert default_title('street-art') == 'Street-art'
        assert default_title('') == ''

    def test_to_sql(self):
        """Test rendered insert-if-absent statement."""
        assert AlbumStatement.for_slug('mystery').to_sql() == (
            "INSERT OR IGNORE INTO albums (slug, title, description) "
            "VALUES ('mystery', 'Mystery', '');"
        )

    def test_parameterized(self):
        """Test placeholder form keeps values out of the SQL text."""
        sql, params = AlbumStatement.for_slug("o'hare").parameterized()

        assert sql == 'INSERT OR IGNORE INTO albums (slug, title, description) VALUES (?, ?, ?);'
        assert params == ("o'hare", "O'hare", '')

    def test_wrangler_command(self):
        """Test the wrangler invocation for one statement."""
        sql = AlbumStatement.for_slug('mystery').to_sql()

        assert wrangler_command('portfolio-db', sql) == (
            'npx wrangler d1 execute "portfolio-db" --command '
            '"INSERT OR IGNORE INTO albums (slug, title, description) '
            "VALUES ('mystery', 'Mystery', '');\""
        )
