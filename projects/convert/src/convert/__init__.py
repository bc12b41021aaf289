"""File conversion: encodings, record formats and per-file dispatch."""

from .config import ConversionOptions, OutputFormat, parse_output_format
from .encoding import AUTO, decode_source, encode_target, transcode
from .errors import (
    ConfigurationError,
    ConversionError,
    FileProcessingError,
    InvalidInputError,
    UnsupportedFormatError,
    UnsupportedInputError,
)
from .processing import (
    SUPPORTED_EXTENSIONS,
    ConvertedDocument,
    convert_file,
    convert_files,
    output_path,
    write_document,
)
from .records import read_csv, read_json, write_csv, write_json
from .tables import records_to_statements, sql_type

__all__ = [
    "AUTO",
    "SUPPORTED_EXTENSIONS",
    "ConfigurationError",
    "ConversionError",
    "ConversionOptions",
    "ConvertedDocument",
    "FileProcessingError",
    "InvalidInputError",
    "OutputFormat",
    "UnsupportedFormatError",
    "UnsupportedInputError",
    "convert_file",
    "convert_files",
    "decode_source",
    "encode_target",
    "output_path",
    "parse_output_format",
    "read_csv",
    "read_json",
    "records_to_statements",
    "sql_type",
    "transcode",
    "write_csv",
    "write_json",
]
