"""Output dialects and the session pragmas each one needs."""

from typing import NamedTuple


class Dialect(NamedTuple):
    """Definition-language output dialect."""

    name: str
    # Whether columns carry their own character set and collation
    column_charsets: bool
    identifier_quote: str
    encoding_pragma: str
    disable_checks: str
    enable_checks: str

    def header_pragmas(self, charset: str) -> list[str]:
        """Pragmas emitted before the first statement."""
        return [
            self.encoding_pragma.format(encoding=self.session_encoding(charset)),
            self.disable_checks,
        ]

    def footer_pragmas(self) -> list[str]:
        """Pragmas emitted after the last statement."""
        return [self.enable_checks]

    def session_encoding(self, charset: str) -> str:
        """Translate a MySQL charset name into this dialect's encoding name."""
        if self.column_charsets:
            return charset
        return POSTGRES_ENCODINGS.get(charset.lower(), charset.upper())


MYSQL = Dialect(
    name="mysql",
    column_charsets=True,
    identifier_quote="`",
    encoding_pragma="SET NAMES {encoding}",
    disable_checks="SET FOREIGN_KEY_CHECKS = 0",
    enable_checks="SET FOREIGN_KEY_CHECKS = 1",
)

POSTGRES = Dialect(
    name="postgres",
    column_charsets=False,
    identifier_quote='"',
    encoding_pragma="SET client_encoding = '{encoding}'",
    disable_checks="SET session_replication_role = 'replica'",
    enable_checks="SET session_replication_role = 'origin'",
)

# MySQL charset names to PostgreSQL server encodings
POSTGRES_ENCODINGS = {
    "utf8mb4": "UTF8",
    "utf8mb3": "UTF8",
    "utf8": "UTF8",
    "latin1": "WIN1252",
    "latin2": "LATIN2",
    "ascii": "SQL_ASCII",
    "cp1250": "WIN1250",
    "cp1251": "WIN1251",
    "cp1256": "WIN1256",
    "koi8r": "KOI8R",
    "koi8u": "KOI8U",
    "sjis": "SJIS",
    "ujis": "EUC_JP",
    "euckr": "EUC_KR",
    "gbk": "GBK",
    "big5": "BIG5",
}


def collation_for(charset: str) -> str:
    """Derive the Unicode collation name paired with a character set."""
    return f"{charset}_unicode_ci"
