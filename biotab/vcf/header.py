import dataclasses
import enum
import logging

from . import exceptions

logger = logging.getLogger(__name__)

# Sub-field keys that are held as attributes of a Directive, in the order
# used when a directive carries no field order of its own.
STANDARD_KEYS = {
    "ID": "id",
    "Number": "number",
    "Type": "type",
    "Description": "description",
    "URL": "url",
}

# Maps a structured directive's key to the Header collection it is stored
# in. Matching is exact and case sensitive.
CATEGORIES = {
    "META": "metas",
    "INFO": "infos",
    "FILTER": "filters",
    "FORMAT": "formats",
    "ALT": "alts",
    "SAMPLE": "samples",
    "assembly": "assemblies",
    "contig": "contigs",
    "pedigree": "pedigrees",
}
OTHER_CATEGORY = "others"

FIXED_COLUMNS = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO")
NUM_FIXED_COLUMNS = len(FIXED_COLUMNS)
FORMAT_COLUMN = "FORMAT"


@dataclasses.dataclass
class SingleValueDirective:
    """
    A ``##key=value`` meta-information line. The key is held in
    ``field_type`` and the value in ``id``.
    """

    field_type: str
    id: str

    def __str__(self):
        return f"##{self.field_type}={self.id}"


@dataclasses.dataclass
class Directive:
    """
    A structured ``##key=<k=v,...>`` meta-information line.

    The standard sub-fields are attributes; anything else is kept in
    ``optional``. ``field_order`` lists every sub-field key in the order it
    was read, which is the order the directive is written back in.
    """

    field_type: str
    id: str = ""
    number: str = ""
    type: str = ""
    description: str = ""
    url: str = ""
    optional: dict = dataclasses.field(default_factory=dict)
    field_order: list = dataclasses.field(default_factory=list)

    @property
    def category(self):
        return CATEGORIES.get(self.field_type, OTHER_CATEGORY)

    def get(self, key):
        attr = STANDARD_KEYS.get(key)
        if attr is not None:
            return getattr(self, attr)
        return self.optional.get(key, "")

    def set(self, key, value):
        attr = STANDARD_KEYS.get(key)
        if attr is not None:
            setattr(self, attr, value)
        else:
            self.optional[key] = value

    @staticmethod
    def from_fields(fields, keys):
        """
        Build a directive from the output of parse_meta_line. Repeated keys
        keep their last value and their first position.
        """
        directive = Directive(field_type=fields["FieldType"])
        for key in keys[1:]:
            if key in directive.field_order:
                continue
            directive.field_order.append(key)
            directive.set(key, fields[key])
        return directive

    def __str__(self):
        field_order = self.field_order
        if len(field_order) == 0:
            field_order = list(STANDARD_KEYS) + list(self.optional)
        items = []
        for key in field_order:
            value = self.get(key)
            if value != "":
                items.append(f"{key}={value}")
        return f"##{self.field_type}=<{','.join(items)}>"


@dataclasses.dataclass
class Header:
    file_format: str = ""
    metas: list = dataclasses.field(default_factory=list)
    infos: list = dataclasses.field(default_factory=list)
    filters: list = dataclasses.field(default_factory=list)
    formats: list = dataclasses.field(default_factory=list)
    alts: list = dataclasses.field(default_factory=list)
    assemblies: list = dataclasses.field(default_factory=list)
    contigs: list = dataclasses.field(default_factory=list)
    samples: list = dataclasses.field(default_factory=list)
    pedigrees: list = dataclasses.field(default_factory=list)
    others: list = dataclasses.field(default_factory=list)
    single_values: list = dataclasses.field(default_factory=list)
    # Every structured directive, in file order
    print_order: list = dataclasses.field(default_factory=list)
    # Sample name -> index among the sample columns
    genotypes: dict = dataclasses.field(default_factory=dict)

    def add_directive(self, directive):
        getattr(self, directive.category).append(directive)
        self.print_order.append(directive)

    def add_single_value(self, directive):
        self.single_values.append(directive)

    @property
    def num_samples(self):
        return len(self.genotypes)

    @property
    def sample_ids(self):
        """
        The sample names in column order.
        """
        return sorted(self.genotypes, key=self.genotypes.get)

    def category_counts(self):
        counts = {}
        for name in list(CATEGORIES.values()) + [OTHER_CATEGORY]:
            counts[name] = len(getattr(self, name))
        return counts


def split_unquoted(text, sep):
    """
    Split text on the specified separator, ignoring any separators inside
    double-quoted strings or square-bracketed lists. Backslash escapes the
    following character.
    """
    pieces = []
    start = 0
    quoted = False
    escaped = False
    depth = 0
    for j, c in enumerate(text):
        if escaped:
            escaped = False
        elif c == "\\":
            escaped = True
        elif c == '"':
            quoted = not quoted
        elif quoted:
            continue
        elif c == "[":
            depth += 1
        elif c == "]" and depth > 0:
            depth -= 1
        elif c == sep and depth == 0:
            pieces.append(text[start:j])
            start = j + 1
    pieces.append(text[start:])
    return pieces


def parse_meta_line(line):
    """
    Classify a single ``##`` meta-information line.

    Returns a tuple ``(fields, keys, structured)``: a dict of the values
    read (including the synthetic "FieldType" and, for simple lines, "ID"
    keys), the keys in the order they were read starting with "FieldType",
    and whether the line was a structured ``<...>`` directive. Sub-fields
    with no ``=`` are dropped. A key that appears twice is listed twice
    in ``keys`` while ``fields`` holds its last value.
    """
    line = line.strip().lstrip("#")
    field_type, sep, value = line.partition("=")
    if sep == "":
        raise exceptions.InvalidMetaHeader(f"Invalid meta header: {line!r}")
    if not value.startswith("<"):
        return {"FieldType": field_type, "ID": value}, ["FieldType", "ID"], False

    fields = {"FieldType": field_type}
    keys = ["FieldType"]
    body = value.strip()[1:]
    if body.endswith(">"):
        body = body[:-1]
    for piece in split_unquoted(body.strip(), ","):
        key, sep, sub_value = piece.partition("=")
        if sep == "":
            continue
        fields[key] = sub_value
        keys.append(key)
    return fields, keys, True


class ParseState(enum.Enum):
    EXPECT_FILE_FORMAT = 1
    EXPECT_META_OR_HEADER = 2
    DONE = 3


class HeaderAssembler:
    """
    Builds a Header from the leading lines of a VCF. Lines are fed one at a
    time until feed() returns True, after the ``#CHROM`` line has been
    consumed.
    """

    def __init__(self):
        self.header = Header()
        self.state = ParseState.EXPECT_FILE_FORMAT
        self.num_lines = 0

    def feed(self, line):
        self.num_lines += 1
        if self.state == ParseState.EXPECT_FILE_FORMAT:
            self._parse_file_format(line)
            self.state = ParseState.EXPECT_META_OR_HEADER
        elif self.state == ParseState.EXPECT_META_OR_HEADER:
            if line.startswith("##"):
                self._parse_meta(line)
            elif line.startswith("#"):
                self._parse_column_header(line)
                self.state = ParseState.DONE
            else:
                raise exceptions.NoHeaderLine(
                    f"Line {self.num_lines} is not a header line; "
                    "no #CHROM header line present"
                )
        else:
            raise ValueError("Header is already complete")
        return self.state == ParseState.DONE

    def finish(self):
        if self.state != ParseState.DONE:
            raise exceptions.NoHeaderLine("No #CHROM header line present")
        logger.debug(
            f"Assembled header from {self.num_lines} lines: "
            f"{len(self.header.print_order)} structured and "
            f"{len(self.header.single_values)} simple directives, "
            f"{self.header.num_samples} samples"
        )
        return self.header

    def _parse_file_format(self, line):
        try:
            fields, _, structured = parse_meta_line(line)
        except exceptions.InvalidMetaHeader as e:
            raise exceptions.NotAVcf("fileformat is not VCF") from e
        if structured or fields["FieldType"] != "fileformat":
            raise exceptions.NotAVcf("fileformat is not VCF")
        self.header.file_format = fields["ID"]

    def _parse_meta(self, line):
        fields, keys, structured = parse_meta_line(line)
        if structured:
            self.header.add_directive(Directive.from_fields(fields, keys))
        else:
            self.header.add_single_value(
                SingleValueDirective(fields["FieldType"], fields["ID"])
            )

    def _parse_column_header(self, line):
        columns = [column.strip() for column in line.rstrip("\r\n").split("\t")]
        if len(columns) < NUM_FIXED_COLUMNS:
            raise exceptions.TooFewColumns(
                "Header has too few columns to be a minimal VCF: "
                f"{len(columns)} < {NUM_FIXED_COLUMNS}"
            )
        if len(columns) == NUM_FIXED_COLUMNS:
            return
        if columns[NUM_FIXED_COLUMNS] != FORMAT_COLUMN:
            raise exceptions.MissingFormatColumn(
                "Header needs a FORMAT column before the sample columns"
            )
        sample_ids = columns[NUM_FIXED_COLUMNS + 1 :]
        if len(sample_ids) == 0:
            raise exceptions.FormatWithoutGenotype(
                "Header FORMAT column must be followed by at least one sample"
            )
        for j, sample_id in enumerate(sample_ids):
            if sample_id in self.header.genotypes:
                raise exceptions.VcfError(f"Duplicate sample name: {sample_id}")
            self.header.genotypes[sample_id] = j
