"""
AlbumStatement - Idempotent album insert statements and their quoting.

Album slugs come from directory names and are treated as untrusted, so
every value is rendered through quote_sql_literal and every command
argument through quote_shell_double.
"""

from dataclasses import dataclass
from typing import Tuple

from .album_definitions import KNOWN_ALBUMS


INSERT_ALBUM_SQL = 'INSERT OR IGNORE INTO albums (slug, title, description) VALUES (?, ?, ?);'

# Characters with special meaning inside a double-quoted shell word
SHELL_DOUBLE_QUOTE_SPECIALS = ('\\', '"', '$', '`')


def quote_sql_literal(value: str) -> str:
    """
    Render value as a single-quoted SQL string literal.

    Single quotes are doubled, which is the only escape SQLite string
    literals need; the result is always one literal that ends where it
    appears to end. NUL characters cannot be represented and are rejected.

    Raises:
        ValueError: If value contains a NUL character
    """
    if '\x00' in value:
        raise ValueError("SQL literal may not contain NUL characters")
    return "'" + value.replace("'", "''") + "'"


def quote_shell_double(value: str) -> str:
    """
    Render value as one double-quoted shell word.

    Backslash, double quote, dollar and backtick are backslash-escaped so
    the shell passes value through unchanged, with no expansion.
    """
    for char in SHELL_DOUBLE_QUOTE_SPECIALS:
        value = value.replace(char, '\\' + char)
    return f'"{value}"'


def default_title(slug: str) -> str:
    """Slug with its first character upper-cased."""
    return slug[:1].upper() + slug[1:]


@dataclass(frozen=True)
class AlbumStatement:
    """
    Insert-if-absent statement for one album, keyed by slug.

    Attributes:
        slug: Album directory name
        title: Display title
        description: Display description
    """
    slug: str
    title: str
    description: str = ''

    @classmethod
    def for_slug(cls, slug: str) -> 'AlbumStatement':
        """Build from the known-album table, falling back to the slug."""
        known = KNOWN_ALBUMS.get(slug)
        if known:
            return cls(slug=slug, title=known['title'], description=known['description'])
        return cls(slug=slug, title=default_title(slug), description='')

    @property
    def params(self) -> Tuple[str, str, str]:
        return (self.slug, self.title, self.description)

    def parameterized(self) -> Tuple[str, Tuple[str, str, str]]:
        """(sql, params) for drivers that bind parameters."""
        return INSERT_ALBUM_SQL, self.params

    def to_sql(self) -> str:
        """
        Literal SQL text for the statement.

        Raises:
            ValueError: If a value cannot be quoted
        """
        values = ', '.join(quote_sql_literal(v) for v in self.params)
        return f"INSERT OR IGNORE INTO albums (slug, title, description) VALUES ({values});"


def wrangler_command(db_name: str, sql: str) -> str:
    """Shell command executing sql against a D1 database with wrangler."""
    return f"npx wrangler d1 execute {quote_shell_double(db_name)} --command {quote_shell_double(sql)}"
