import dataclasses

from .. import constants, core
from . import exceptions
from .header import NUM_FIXED_COLUMNS


@dataclasses.dataclass
class Genotype:
    """
    The decoded data for one sample of a record.

    ``gt`` holds the allele indexes of the GT sub-field, with
    ALLELE_MISSING (-1) standing in for ".". ``fields`` maps every FORMAT
    key to this sample's raw value.
    """

    id: str
    gt: list = dataclasses.field(default_factory=list)
    phased: bool = False
    fields: dict = dataclasses.field(default_factory=dict)


def parse_gt(value):
    """
    Parse a GT value such as "0|1" or "1/.", returning the list of allele
    indexes and whether the genotype is phased.
    """
    alleles = value.split("|")
    phased = len(alleles) > 1
    if not phased:
        alleles = value.split("/")
    gt = []
    for allele in alleles:
        if allele == constants.STR_MISSING:
            gt.append(constants.ALLELE_MISSING)
            continue
        try:
            gt.append(int(allele))
        except ValueError:
            raise exceptions.MalformedGenotypeData(
                f"Invalid allele {allele!r} in GT value {value!r}"
            ) from None
    return gt, phased


@dataclasses.dataclass
class Record:
    """
    A single VCF data line.

    Sample columns are kept as the raw strings in ``genotypes`` and are
    only decoded when asked for through decode_genotype(), which caches
    the result in ``parsed_genotypes``. The cache is not guarded by a
    lock: callers sharing a record between threads must synchronise
    their decode calls.
    """

    chrom: str
    pos: int
    id: str
    ref: str
    alt: list
    qual: float
    qual_format: str
    filter: str
    info: dict = dataclasses.field(default_factory=dict)
    # INFO key -> position among the INFO entries
    info_order: dict = dataclasses.field(default_factory=dict)
    # FORMAT key -> position within each sample column
    format: dict = dataclasses.field(default_factory=dict)
    genotypes: list = dataclasses.field(default_factory=list)
    parsed_genotypes: dict = dataclasses.field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def start_zero(self):
        if self.pos == constants.POS_MISSING:
            return constants.POS_MISSING
        return self.pos - 1

    @property
    def end_zero(self):
        return self.start_zero

    @property
    def start_one(self):
        return self.pos

    @property
    def end_one(self):
        return self.start_one

    @property
    def qual_missing(self):
        return self.qual == constants.QUAL_MISSING

    def decode_genotype(self, sample_id, sample_index):
        """
        Return the decoded Genotype for the specified sample, where
        sample_index maps sample names to their column (Header.genotypes).
        Each sample is decoded at most once per record; later calls
        return the same object.
        """
        try:
            column = sample_index[sample_id]
        except KeyError:
            raise exceptions.GenotypeNotInFile(
                f"Sample {sample_id!r} is not in the VCF"
            ) from None
        genotype = self.parsed_genotypes.get(sample_id)
        if genotype is not None:
            return genotype

        if column >= len(self.genotypes):
            raise exceptions.MalformedGenotypeData(
                f"Record has no genotype data for sample {sample_id!r}"
            )
        values = self.genotypes[column].split(":")
        if len(values) != len(self.format):
            raise exceptions.MalformedGenotypeData(
                f"Genotype for sample {sample_id!r} has {len(values)} values "
                f"but FORMAT has {len(self.format)} keys"
            )
        genotype = Genotype(id=sample_id)
        for key, j in self.format.items():
            value = values[j]
            genotype.fields[key] = value
            if key == "GT":
                genotype.gt, genotype.phased = parse_gt(value)
        self.parsed_genotypes[sample_id] = genotype
        return genotype

    def decode_genotypes(self, sample_ids, sample_index):
        """
        Decode the specified samples, returning a list of genotypes and a
        parallel list of errors. A sample that fails to decode has None in
        the genotypes list and the exception in the errors list.
        """
        genotypes = []
        errors = []
        for sample_id in sample_ids:
            try:
                genotype = self.decode_genotype(sample_id, sample_index)
            except exceptions.VcfError as e:
                genotypes.append(None)
                errors.append(e)
            else:
                genotypes.append(genotype)
                errors.append(None)
        return genotypes, errors

    def decode_all_genotypes(self, sample_index):
        sample_ids = sorted(sample_index, key=sample_index.get)
        return self.decode_genotypes(sample_ids, sample_index)


def parse_info(text):
    """
    Split an INFO column into a dict of values and a dict of positions.
    Flag entries (no "=") store their key as the value.
    """
    info = {}
    info_order = {}
    for j, item in enumerate(text.split(";")):
        key, sep, value = item.partition("=")
        if sep == "":
            value = key
        info[key] = value
        info_order[key] = j
    return info, info_order


def parse_qual(text):
    if text == constants.STR_MISSING:
        qual = constants.QUAL_MISSING
    else:
        qual = core.parse_float(text, 0.0)
    return qual, core.float_notation(text)


def valid_num_columns(num_columns, num_samples):
    """
    A record has either no genotype section or a FORMAT column followed by
    exactly one column per sample.
    """
    if num_columns == NUM_FIXED_COLUMNS:
        return True
    return num_samples > 0 and num_columns == NUM_FIXED_COLUMNS + 1 + num_samples


def parse_record(line, num_samples):
    """
    Parse a single VCF data line. num_samples is the number of samples
    declared in the header, which determines how many columns the line may
    have.
    """
    columns = [column.strip() for column in line.split("\t")]
    if not valid_num_columns(len(columns), num_samples):
        expected = f"{NUM_FIXED_COLUMNS}"
        if num_samples > 0:
            expected += f" or {NUM_FIXED_COLUMNS + 1 + num_samples}"
        raise exceptions.TooFewColumns(
            f"Wrong number of columns in record line: got {len(columns)}, "
            f"expected {expected}"
        )
    qual, qual_format = parse_qual(columns[5])
    info, info_order = parse_info(columns[7])
    record = Record(
        chrom=columns[0],
        pos=core.parse_uint(columns[1]),
        id=columns[2],
        ref=columns[3],
        alt=columns[4].split(","),
        qual=qual,
        qual_format=qual_format,
        filter=columns[6],
        info=info,
        info_order=info_order,
    )
    if len(columns) > NUM_FIXED_COLUMNS:
        keys = columns[NUM_FIXED_COLUMNS].split(":")
        record.format = {key: j for j, key in enumerate(keys)}
        record.genotypes = columns[NUM_FIXED_COLUMNS + 1 :]
    return record
