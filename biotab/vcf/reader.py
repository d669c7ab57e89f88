import logging

from . import exceptions
from . import header as header_mod
from . import record as record_mod

logger = logging.getLogger(__name__)


def _decode(line):
    if isinstance(line, bytes):
        try:
            return line.decode()
        except UnicodeDecodeError as e:
            raise exceptions.VcfError(f"Input is not valid UTF-8: {e}") from e
    return line


class Reader:
    """
    Sequential reader over the records of a VCF stream, positioned after
    the header. Create instances with open_reader().
    """

    def __init__(self, stream, header, line_number=0):
        self.stream = stream
        self.header = header
        self.line_number = line_number

    def __iter__(self):
        while True:
            record = self.read_record()
            if record is None:
                break
            yield record

    def read_record(self):
        """
        Return the next Record, or None at the end of the input. A
        VcfError raised for a bad line leaves the reader at the next line,
        so reading can continue.
        """
        line = self.stream.readline()
        if len(line) == 0:
            return None
        self.line_number += 1
        try:
            return record_mod.parse_record(_decode(line), self.header.num_samples)
        except exceptions.VcfError as e:
            logger.debug(f"Failed to parse record at line {self.line_number}: {e}")
            raise

    def read_all_records(self):
        return list(self)


def open_reader(stream):
    """
    Read the header from the specified text (or binary) stream and return
    a Reader positioned at the first record. The header is available as
    ``reader.header``.

    Raises EndOfInput if the stream is empty, and a VcfError if the header
    is malformed.
    """
    assembler = header_mod.HeaderAssembler()
    while True:
        line = stream.readline()
        if len(line) == 0:
            if assembler.num_lines == 0:
                raise exceptions.EndOfInput("Empty input")
            break
        if assembler.feed(_decode(line)):
            break
    header = assembler.finish()
    logger.info(
        f"Read VCF header: fileformat={header.file_format} "
        f"directives={len(header.single_values) + len(header.print_order)} "
        f"samples={header.num_samples}"
    )
    return Reader(stream, header, assembler.num_lines)
