"""
zqcparse - ZQC Parser Command-Line Interface
============================================

Parses a ZQC source file (or a token XML file produced by ``zqclex``)
and writes the syntax tree as XML.

Usage Examples
--------------
Parse a source file (writes prog.c_tree.xml):
    $ zqcparse prog.c

Parse a token file:
    $ zqcparse --tokens prog.c.xml

Stop after the first five errors:
    $ zqcparse --max-errors 5 prog.c

When the input has syntax errors, every diagnostic is printed to stderr
and the exit code is 1; no tree is written.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from zqc import __version__
from zqc.cli.errors import ExitCode, handle_cli_exception, setup_logging
from zqc.frontend.driver import parse_source, parse_token_file
from zqc.frontend.options import ParserOptions
from zqc.frontend.xml_printer import XMLPrinter

logger = logging.getLogger(__name__)


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens", "from_tokens",
    is_flag=True,
    help="INPUT_FILE is a token XML file written by zqclex",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output tree file (default: INPUT_FILE_tree.xml)",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop reporting after this many errors",
)
@click.option(
    "--max-nesting",
    type=click.IntRange(min=1),
    default=64,
    show_default=True,
    help="Deepest nesting the parser accepts",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="zqcparse")
def main(
    input_file: Path,
    from_tokens: bool,
    output: Optional[Path],
    max_errors: int,
    max_nesting: int,
    verbose: bool,
) -> None:
    """
    Parse a ZQC program into an XML syntax tree.

    INPUT_FILE is a source file, or a token file when --tokens is given.

    \b
    Examples:
        zqcparse prog.c                  # Outputs prog.c_tree.xml
        zqcparse --tokens prog.c.xml     # Parse serialized tokens
        zqcparse prog.c -o tree.xml      # Specify output file
    """
    setup_logging(verbose)

    if output is None:
        output = Path(f"{input_file}_tree.xml")

    options = ParserOptions(
        filename=input_file.name,
        max_errors=max_errors,
        max_nesting=max_nesting,
    )

    try:
        if from_tokens:
            outcome = parse_token_file(input_file, options)
        else:
            source = input_file.read_text(encoding="utf-8")
            outcome = parse_source(source, options=options)

        if verbose:
            click.echo(f"Parsed {len(outcome.unit.declarations)} top-level declarations")

        if not outcome.ok:
            click.echo(outcome.diagnostics.report(), err=True)
            sys.exit(ExitCode.PARSE_ERROR)

        for warning in outcome.diagnostics.warnings:
            click.echo(warning, err=True)

        output.write_text(XMLPrinter().print(outcome.unit), encoding="utf-8")
        logger.debug("Wrote tree to %s", output)
        click.echo(f"{input_file.name} is successfully parsed!")

    except SystemExit:
        raise
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Parse")


if __name__ == "__main__":
    main()
