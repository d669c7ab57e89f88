import logging
import math

from .. import constants, core
from .header import FIXED_COLUMNS, FORMAT_COLUMN

logger = logging.getLogger(__name__)


def format_header(header):
    lines = [f"##fileformat={header.file_format}"]
    for directive in header.single_values:
        lines.append(str(directive))
    for directive in header.print_order:
        lines.append(str(directive))
    columns = list(FIXED_COLUMNS)
    if header.num_samples > 0:
        columns.append(FORMAT_COLUMN)
        columns.extend(header.sample_ids)
    lines.append("\t".join(columns))
    return "\n".join(lines)


def format_info(record):
    # Keys with no recorded position go last, in insertion order
    keys = sorted(record.info, key=lambda k: record.info_order.get(k, math.inf))
    items = []
    for key in keys:
        value = record.info[key]
        if key == value:
            items.append(key)
        else:
            items.append(f"{key}={value}")
    return ";".join(items)


def format_qual(record):
    if record.qual == constants.QUAL_MISSING:
        return constants.STR_MISSING
    return core.format_float(record.qual, record.qual_format)


def format_record(record):
    """
    Return the VCF text for the specified record, without a newline. Sample
    columns are written from the raw genotype strings; decoded genotypes
    are ignored.
    """
    columns = [
        record.chrom,
        str(record.pos),
        record.id,
        record.ref,
        ",".join(record.alt),
        format_qual(record),
        record.filter,
        format_info(record),
    ]
    if len(record.genotypes) > 0:
        columns.append(":".join(sorted(record.format, key=record.format.get)))
        columns.extend(record.genotypes)
    return "\t".join(columns)


class Writer:
    """
    Writes a Header and Records to a text stream, one newline-terminated
    line each.
    """

    def __init__(self, stream):
        self.stream = stream
        self.header_written = False

    def write_header(self, header):
        self.stream.write(format_header(header) + "\n")
        self.header_written = True
        logger.debug(f"Wrote header with {header.num_samples} samples")

    def write_record(self, record, header=None):
        """
        Write a single record. If a header is given and no header has been
        written yet, it is written first.
        """
        if header is not None and not self.header_written:
            self.write_header(header)
        self.stream.write(format_record(record) + "\n")

    def write_all(self, records, header=None):
        if header is not None:
            self.write_header(header)
        num_records = 0
        for record in records:
            self.write_record(record)
            num_records += 1
        logger.debug(f"Wrote {num_records} records")
