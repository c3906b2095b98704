"""
zqclex - ZQC Lexer Command-Line Interface
=========================================

Tokenizes a ZQC source file and writes the token stream in the token XML
record format read by ``zqcparse --tokens``.

Usage Examples
--------------
Basic tokenization (writes prog.c.xml):
    $ zqclex prog.c

With output file:
    $ zqclex prog.c -o tokens.xml

Lex then parse:
    $ zqclex prog.c && zqcparse --tokens prog.c.xml
"""

import logging
from pathlib import Path
from typing import Optional

import click

from zqc import __version__
from zqc.cli.errors import handle_cli_exception, setup_logging
from zqc.frontend.lexer import tokenize
from zqc.frontend.token_xml import dump_tokens

logger = logging.getLogger(__name__)


@click.command()
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output token file (default: SOURCE_FILE.xml)",
)
@click.option(
    "--categories",
    is_flag=True,
    help="Write coarse token categories instead of token kind names",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="zqclex")
def main(source_file: Path, output: Optional[Path], categories: bool, verbose: bool) -> None:
    """
    Tokenize a ZQC source file.

    SOURCE_FILE is the source file to tokenize. The tokens are written as
    seven-line XML records, one per token, ending with the EOF marker.

    \b
    Examples:
        zqclex prog.c                # Outputs prog.c.xml
        zqclex prog.c -o toks.xml    # Specify output file
        zqclex prog.c --categories   # Coarse type names
    """
    setup_logging(verbose)

    if output is None:
        output = Path(f"{source_file}.xml")

    try:
        source = source_file.read_text(encoding="utf-8")
        tokens = tokenize(source, str(source_file))
        logger.debug("Lexed %d tokens from %s", len(tokens), source_file)

        output.write_text(dump_tokens(tokens, categories), encoding="utf-8")

        ill_formed = sum(1 for token in tokens if not token.well_formed)
        if ill_formed:
            click.echo(f"warning: {ill_formed} unterminated literal(s) in {source_file}", err=True)

        click.echo(f"Tokenized {source_file} -> {output} ({len(tokens)} tokens)")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Lexer")


if __name__ == "__main__":
    main()
