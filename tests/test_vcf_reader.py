import io
import logging
import pathlib

import pytest

from biotab import constants, vcf

data_path = pathlib.Path("tests/data/vcf/")

HEADER = (
    "##fileformat=VCFv4.2\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tA\tB\n"
)


class TestOpenReader:
    def test_sample(self):
        with open(data_path / "sample.vcf") as f:
            reader = vcf.open_reader(f)
            header = reader.header
            assert reader.line_number == 19
            records = reader.read_all_records()
        assert header.file_format == "VCFv4.2"
        assert header.sample_ids == ["NA00001", "NA00002", "NA00003"]
        assert [d.field_type for d in header.single_values] == [
            "fileDate",
            "source",
            "reference",
            "phasing",
        ]
        assert [d.id for d in header.infos] == ["NS", "DP", "AF", "AA", "DB", "H2"]
        assert [d.id for d in header.filters] == ["q10", "s50"]
        assert [d.id for d in header.formats] == ["GT", "GQ", "DP", "HQ"]
        assert [d.id for d in header.contigs] == ["20"]
        assert header.contigs[0].optional["species"] == '"Homo sapiens"'
        assert header.infos[2].description == '"Allele Frequency, per ALT allele"'
        assert len(header.print_order) == 13
        assert len(records) == 6
        assert [r.pos for r in records] == [
            14370,
            17330,
            1110696,
            1230237,
            1234567,
            1234600,
        ]

    def test_no_genotypes(self):
        with open(data_path / "sample_no_genotypes.vcf") as f:
            reader = vcf.open_reader(f)
            records = list(reader)
        header = reader.header
        assert header.num_samples == 0
        assert header.category_counts() == {
            "metas": 1,
            "infos": 5,
            "filters": 1,
            "formats": 0,
            "alts": 1,
            "samples": 1,
            "assemblies": 1,
            "contigs": 0,
            "pedigrees": 1,
            "others": 1,
        }
        assert header.assemblies[0].url == "ftp://example.org/asm1.fa"
        assert len(records) == 3
        assert records[1].qual == 1e20
        assert records[1].qual_format == "e"
        assert records[2].qual_missing

    def test_binary_stream(self):
        with open(data_path / "sample.vcf", "rb") as f:
            reader = vcf.open_reader(f)
            records = reader.read_all_records()
        assert reader.header.num_samples == 3
        assert len(records) == 6

    def test_decode_from_file(self):
        with open(data_path / "sample.vcf") as f:
            reader = vcf.open_reader(f)
            records = reader.read_all_records()
        sample_index = reader.header.genotypes
        genotype = records[2].decode_genotype("NA00002", sample_index)
        assert genotype.gt == [2, 1]
        assert genotype.phased
        genotype = records[4].decode_genotype("NA00003", sample_index)
        assert genotype.gt == [constants.ALLELE_MISSING, constants.ALLELE_MISSING]
        genotypes, errors = records[3].decode_all_genotypes(sample_index)
        assert errors[:2] == [None, None]
        assert genotypes[2] is None
        assert isinstance(errors[2], vcf.MalformedGenotypeData)

    def test_empty_file(self):
        with open(data_path / "empty.vcf") as f:
            with pytest.raises(vcf.EndOfInput):
                vcf.open_reader(f)

    def test_end_of_input_is_not_a_format_error(self):
        with pytest.raises(EOFError) as excinfo:
            vcf.open_reader(io.StringIO(""))
        assert not isinstance(excinfo.value, vcf.VcfError)

    def test_header_only(self):
        reader = vcf.open_reader(io.StringIO(HEADER))
        assert reader.read_record() is None
        assert reader.read_all_records() == []

    def test_no_column_header(self):
        with pytest.raises(vcf.NoHeaderLine):
            vcf.open_reader(io.StringIO("##fileformat=VCFv4.2\n##source=x\n"))

    def test_not_a_vcf(self):
        with pytest.raises(vcf.NotAVcf):
            vcf.open_reader(io.StringIO("chr1\t1\t2\n"))

    def test_header_error(self):
        stream = io.StringIO("##fileformat=VCFv4.2\n" + "#CHROM\tPOS\tID\tREF\tALT\n")
        with pytest.raises(vcf.TooFewColumns):
            vcf.open_reader(stream)

    def test_header_summary_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="biotab.vcf.reader"):
            vcf.open_reader(io.StringIO(HEADER))
        assert "samples=2" in caplog.text


class TestReadRecord:
    def test_continue_after_error(self, caplog):
        stream = io.StringIO(
            HEADER
            + "20\t1\t.\tA\tC\t.\tPASS\t.\tGT\t0|1\n"
            + "20\t2\t.\tA\tC\t.\tPASS\t.\tGT\t0|1\t1|1\n"
        )
        reader = vcf.open_reader(stream)
        with caplog.at_level(logging.DEBUG, logger="biotab.vcf.reader"):
            with pytest.raises(vcf.TooFewColumns, match="got 10, expected 8 or 11"):
                reader.read_record()
        assert reader.line_number == 3
        assert "line 3" in caplog.text
        record = reader.read_record()
        assert record.pos == 2
        assert reader.line_number == 4
        assert reader.read_record() is None

    def test_blank_line(self):
        reader = vcf.open_reader(io.StringIO(HEADER + "\n"))
        with pytest.raises(vcf.TooFewColumns):
            reader.read_record()

    def test_read_all_propagates(self):
        reader = vcf.open_reader(io.StringIO(HEADER + "20\t1\t.\tA\n"))
        with pytest.raises(vcf.TooFewColumns):
            reader.read_all_records()

    def test_iteration(self):
        stream = io.StringIO(
            HEADER
            + "20\t1\t.\tA\tC\t.\tPASS\t.\n"
            + "20\t2\t.\tA\tC\t.\tPASS\t.\tGT\t0|1\t1|1\n"
        )
        reader = vcf.open_reader(stream)
        assert [record.pos for record in reader] == [1, 2]


class TestInvalidUtf8:
    def test_header(self):
        stream = io.BytesIO(b"##fileformat=VCFv4.2\n##source=\xff\n")
        with pytest.raises(vcf.VcfError, match="not valid UTF-8") as excinfo:
            vcf.open_reader(stream)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_record(self, caplog):
        stream = io.BytesIO(
            HEADER.encode()
            + b"20\t1\t.\tA\tC\t.\tPASS\tX=\xfe\tGT\t0|1\t1|1\n"
            + b"20\t2\t.\tA\tC\t.\tPASS\t.\tGT\t0|1\t1|1\n"
        )
        reader = vcf.open_reader(stream)
        with caplog.at_level(logging.DEBUG, logger="biotab.vcf.reader"):
            with pytest.raises(vcf.VcfError, match="not valid UTF-8"):
                reader.read_record()
        assert reader.line_number == 3
        assert "line 3" in caplog.text
        assert reader.read_record().pos == 2
