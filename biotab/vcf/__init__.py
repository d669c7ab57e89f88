from .exceptions import (
    EndOfInput,
    FormatWithoutGenotype,
    GenotypeNotInFile,
    InvalidMetaHeader,
    MalformedGenotypeData,
    MissingFormatColumn,
    NoHeaderLine,
    NotAVcf,
    TooFewColumns,
    VcfError,
)
from .header import (
    Directive,
    Header,
    HeaderAssembler,
    SingleValueDirective,
    parse_meta_line,
)
from .reader import Reader, open_reader
from .record import Genotype, Record, parse_record
from .writer import Writer

__all__ = [
    "EndOfInput",
    "FormatWithoutGenotype",
    "GenotypeNotInFile",
    "InvalidMetaHeader",
    "MalformedGenotypeData",
    "MissingFormatColumn",
    "NoHeaderLine",
    "NotAVcf",
    "TooFewColumns",
    "VcfError",
    "Directive",
    "Header",
    "HeaderAssembler",
    "SingleValueDirective",
    "parse_meta_line",
    "Reader",
    "open_reader",
    "Genotype",
    "Record",
    "parse_record",
    "Writer",
]
