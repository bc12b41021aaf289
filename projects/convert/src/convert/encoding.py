"""Character encoding names and buffer transcoding.

Encodings are named the MySQL way (``utf8mb4``, ``latin1``) because the same
name ends up in ``SET NAMES`` and column charset annotations. Python codec
names are accepted as well.
"""

import codecs
import logging

from .errors import ConfigurationError, InvalidInputError

logger = logging.getLogger(__name__)

AUTO = "auto"

# Codecs tried in order when the source encoding is detected
AUTO_CODECS = ("utf-8-sig", "cp1252", "latin-1")

# MySQL character sets and the Python codecs that read and write them
MYSQL_CODECS = {
    "utf8mb4": "utf-8",
    "utf8mb3": "utf-8",
    "utf8": "utf-8",
    # MySQL latin1 is Windows-1252
    "latin1": "cp1252",
    "latin2": "iso8859-2",
    "ascii": "ascii",
    "cp1250": "cp1250",
    "cp1251": "cp1251",
    "cp1256": "cp1256",
    "koi8r": "koi8-r",
    "koi8u": "koi8-u",
    "sjis": "shift_jis",
    "ujis": "euc_jp",
    "euckr": "euc_kr",
    "gbk": "gbk",
    "big5": "big5",
    "utf16": "utf-16-be",
    "utf32": "utf-32-be",
}

# Preferred MySQL name for a Python codec
CHARSETS = {
    "utf-8": "utf8mb4",
    "cp1252": "latin1",
    "latin-1": "latin1",
    "iso8859-1": "latin1",
    "iso8859-2": "latin2",
    "ascii": "ascii",
}


def codec_for(encoding: str) -> str:
    """Resolve an encoding name to a Python codec name.

    Raises:
        ConfigurationError: If the name is neither a MySQL charset nor a codec

    """
    name = encoding.strip().lower()
    if name in MYSQL_CODECS:
        return MYSQL_CODECS[name]
    try:
        return codecs.lookup(name).name
    except LookupError:
        msg = f"Unknown encoding: {encoding}"
        raise ConfigurationError(msg) from None


def charset_for(encoding: str) -> str:
    """Resolve an encoding name to the MySQL charset name used in output."""
    name = encoding.strip().lower()
    if name in MYSQL_CODECS:
        return name
    codec = codec_for(name)
    return CHARSETS.get(codec, codec.replace("-", "").replace("_", ""))


def validate_encoding(encoding: str, *, allow_auto: bool = False) -> None:
    """Raise ConfigurationError unless the encoding can be used."""
    if allow_auto and encoding.strip().lower() == AUTO:
        return
    codec_for(encoding)


def decode_source(data: bytes, encoding: str = AUTO) -> str:
    """Decode raw input bytes.

    With ``auto``, UTF-8 (with or without a byte order mark) is tried first,
    then Windows-1252, then Latin-1, which accepts any byte sequence.

    Raises:
        InvalidInputError: If the bytes are not valid in an explicit encoding

    """
    if encoding.strip().lower() == AUTO:
        for codec in AUTO_CODECS:
            try:
                text = data.decode(codec)
            except UnicodeDecodeError:
                continue
            logger.debug("Detected source encoding %s", codec)
            return text

    codec = codec_for(encoding)
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        msg = f"Input is not valid {encoding}: {e.reason} at byte {e.start}"
        raise InvalidInputError(msg) from e


def encode_target(text: str, encoding: str) -> bytes:
    """Encode output text, replacing characters the target cannot represent."""
    codec = codec_for(encoding)
    try:
        return text.encode(codec)
    except UnicodeEncodeError as e:
        logger.warning(
            "Characters not representable in %s were replaced (first at offset %d)",
            encoding,
            e.start,
        )
        return text.encode(codec, errors="replace")


def transcode(data: bytes, source: str, target: str) -> bytes:
    """Convert a buffer from one encoding to another."""
    return encode_target(decode_source(data, source), target)
