import dataclasses
import logging
import os
import sys

import click
import coloredlogs
import tabulate

from . import core, gff, provenance, vcf

logger = logging.getLogger(__name__)


class NaturalOrderGroup(click.Group):
    """
    List commands in the order they are provided in the help text.
    """

    def list_commands(self, ctx):
        return self.commands.keys()


# Common arguments/options
path = click.argument("path", type=click.Path(exists=True, dir_okay=False))

verbose = click.option("-v", "--verbose", count=True, help="Increase verbosity")

json = click.option(
    "--json",
    is_flag=True,
    flag_value=True,
    help="Output summary data in JSON format",
)

version = click.version_option(version=f"{provenance.__version__}")


def setup_logging(verbosity):
    level = "WARNING"
    if verbosity == 1:
        level = "INFO"
    elif verbosity >= 2:
        level = "DEBUG"
    coloredlogs.install(level=level)


@dataclasses.dataclass
class VcfSummary(core.JsonDataclass):
    file_format: str
    file_size: str
    num_samples: int
    num_simple_directives: int
    num_structured_directives: int
    categories: dict
    num_records: int


def show_summary(summary, json):
    if json:
        output = summary.asjson()
    else:
        data = summary.asdict()
        categories = data.pop("categories")
        rows = list(data.items())
        rows.extend(
            (f"num_{name}_directives", count) for name, count in categories.items()
        )
        output = tabulate.tabulate(rows, tablefmt="plain")
    click.echo(output)


def read_vcf_header(path, f):
    try:
        return vcf.open_reader(f)
    except vcf.VcfError as e:
        raise click.ClickException(f"{path}: {e}") from e


@click.command(name="vcf-inspect")
@path
@verbose
@json
def vcf_inspect(path, verbose, json):
    """
    Print a summary of the header and records of a VCF file.
    """
    setup_logging(verbose)
    with open(path, "rb") as f:
        try:
            reader = read_vcf_header(path, f)
        except vcf.EndOfInput:
            logger.warning(f"{path} is empty")
            return
        try:
            num_records = sum(1 for _ in reader)
        except vcf.VcfError as e:
            raise click.ClickException(
                f"{path}: line {reader.line_number}: {e}"
            ) from e
    header = reader.header
    summary = VcfSummary(
        file_format=header.file_format,
        file_size=core.display_size(os.path.getsize(path)),
        num_samples=header.num_samples,
        num_simple_directives=len(header.single_values),
        num_structured_directives=len(header.print_order),
        categories=header.category_counts(),
        num_records=num_records,
    )
    show_summary(summary, json)


@click.command(name="vcf-cat")
@path
@verbose
def vcf_cat(path, verbose):
    """
    Parse a VCF file and write it back to standard output.
    """
    setup_logging(verbose)
    with open(path, "rb") as f:
        try:
            reader = read_vcf_header(path, f)
        except vcf.EndOfInput:
            logger.info(f"{path} is empty")
            return
        writer = vcf.Writer(sys.stdout)
        writer.write_header(reader.header)
        try:
            for record in reader:
                writer.write_record(record)
        except vcf.VcfError as e:
            raise click.ClickException(
                f"{path}: line {reader.line_number}: {e}"
            ) from e


@click.command(name="gff-cat")
@path
@verbose
def gff_cat(path, verbose):
    """
    Parse a GFF3 file and write it back to standard output.
    """
    setup_logging(verbose)
    writer = gff.Writer(sys.stdout)
    with open(path, "rb") as f:
        reader = gff.Reader(f)
        try:
            writer.write_all(reader)
        except gff.GffError as e:
            raise click.ClickException(
                f"{path}: line {reader.line_number}: {e}"
            ) from e


@click.group(cls=NaturalOrderGroup, name="biotab")
@version
def biotab_main():
    pass


biotab_main.add_command(vcf_inspect)
biotab_main.add_command(vcf_cat)
biotab_main.add_command(gff_cat)
