class VcfError(ValueError):
    """Base class for malformed VCF input."""


class InvalidMetaHeader(VcfError):
    """A ``##`` meta-information line has no ``=``."""


class NotAVcf(VcfError):
    """The first line is not a ``##fileformat=...`` declaration."""


class TooFewColumns(VcfError):
    """The column header or a record line has an invalid number of fields."""


class MissingFormatColumn(VcfError):
    """Sample columns are declared without a preceding FORMAT column."""


class FormatWithoutGenotype(VcfError):
    """A FORMAT column is declared but no sample columns follow it."""


class NoHeaderLine(VcfError):
    """The stream ended before a ``#CHROM`` column header line was seen."""


class GenotypeNotInFile(VcfError):
    """The requested sample is not one of the file's sample columns."""


class MalformedGenotypeData(VcfError):
    """A sample column doesn't match the record's FORMAT column."""


class EndOfInput(EOFError):
    """The stream held no bytes at all. Not a format error."""
