"""
Reading and writing GFF3 feature lines.

See http://www.sequenceontology.org/gff3.shtml. Comment and pragma lines
are skipped when reading; feature types are not validated.
"""
import dataclasses
import logging

from . import constants, core

logger = logging.getLogger(__name__)

GFF_VERSION = "3.2.1"
STRANDS = ("+", "-", "?", ".")
NUM_COLUMNS = 9


class GffError(ValueError):
    pass


@dataclasses.dataclass
class Feature:
    """
    A single GFF3 feature. Coordinates are one-based; a "." start or end is
    stored as POS_MISSING, a "." score as SCORE_MISSING and a "." (or out of
    range) phase as PHASE_MISSING.
    """

    seqid: str
    source: str
    type: str
    start: int = constants.POS_MISSING
    end: int = constants.POS_MISSING
    score: float = constants.SCORE_MISSING
    strand: str = constants.STR_MISSING
    phase: int = constants.PHASE_MISSING
    attributes: dict = dataclasses.field(default_factory=dict)

    @property
    def start_zero(self):
        if self.start == constants.POS_MISSING:
            return constants.POS_MISSING
        return self.start - 1

    @property
    def end_zero(self):
        if self.end == constants.POS_MISSING:
            return constants.POS_MISSING
        return self.end - 1

    @property
    def start_one(self):
        return self.start

    @property
    def end_one(self):
        return self.end

    def __str__(self):
        columns = [
            self.seqid,
            self.source,
            self.type,
            format_position(self.start),
            format_position(self.end),
            format_score(self.score),
            self.strand,
            format_phase(self.phase),
        ]
        if len(self.attributes) > 0:
            columns.append(
                ";".join(f"{k}={self.attributes[k]}" for k in sorted(self.attributes))
            )
        return "\t".join(columns)


def format_position(value):
    if value == constants.POS_MISSING:
        return constants.STR_MISSING
    return str(value)


def format_score(value):
    if value == constants.SCORE_MISSING:
        return constants.STR_MISSING
    return core.format_float(value, constants.QUAL_FORMAT_EXPONENT)


def format_phase(value):
    if value == constants.PHASE_MISSING:
        return constants.STR_MISSING
    return str(value)


def parse_score(text):
    if text == constants.STR_MISSING:
        return constants.SCORE_MISSING
    return core.parse_float(text, constants.SCORE_MISSING)


def parse_phase(text):
    if text in ("0", "1", "2"):
        return int(text)
    return constants.PHASE_MISSING


def parse_attributes(text):
    attributes = {}
    if text == constants.STR_MISSING:
        return attributes
    for item in text.split(";"):
        key, sep, value = item.partition("=")
        if sep == "":
            continue
        attributes[key.strip()] = value.strip()
    return attributes


def parse_feature(line):
    columns = line.rstrip("\r\n").split("\t")
    if len(columns) not in (NUM_COLUMNS - 1, NUM_COLUMNS):
        raise GffError(f"Wrong number of fields: {len(columns)}")
    strand = columns[6]
    if strand not in STRANDS:
        strand = constants.STR_MISSING
    feature = Feature(
        seqid=columns[0],
        source=columns[1],
        type=columns[2],
        start=core.parse_uint(columns[3]),
        end=core.parse_uint(columns[4]),
        score=parse_score(columns[5]),
        strand=strand,
        phase=parse_phase(columns[7]),
    )
    if len(columns) == NUM_COLUMNS:
        feature.attributes = parse_attributes(columns[8])
    return feature


class Reader:
    def __init__(self, stream):
        self.stream = stream
        self.line_number = 0

    def __iter__(self):
        while True:
            feature = self.read_feature()
            if feature is None:
                break
            yield feature

    def read_feature(self):
        """
        Return the next feature, or None at the end of the input.
        """
        while True:
            line = self.stream.readline()
            if len(line) == 0:
                return None
            self.line_number += 1
            if isinstance(line, bytes):
                try:
                    line = line.decode()
                except UnicodeDecodeError as e:
                    logger.debug(f"Undecodable line {self.line_number}: {e}")
                    raise GffError(f"Input is not valid UTF-8: {e}") from e
            if line.startswith("#") or line.strip() == "":
                continue
            try:
                return parse_feature(line)
            except GffError as e:
                logger.debug(f"Failed to parse feature at line {self.line_number}: {e}")
                raise

    def read_all_features(self):
        return list(self)


class Writer:
    """
    Writes GFF3 features to a text stream. The gff-version pragma is
    written when the writer is created.
    """

    def __init__(self, stream):
        self.stream = stream
        self.stream.write(f"##gff-version {GFF_VERSION}\n")

    def write_feature(self, feature):
        self.stream.write(f"{feature}\n")

    def write_all(self, features):
        for feature in features:
            self.write_feature(feature)
