# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for pdfglyphmap.

Resolves the fonts used by a PDF and prints how their character codes
map to glyphs and Unicode text.
"""

# Standard Library
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

# Third Party
import click
import pikepdf
from colorama import Fore, Style, init

# Local
from . import __version__
from .exceptions import PdfGlyphMapError
from .fonts import ExplicitMap, FontCache, ResolvedFont, iter_page_fonts
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_RESOLUTION_FAILED = 3

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}✗ Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Prints a warning in yellow.

    Args:
        msg: The warning to output.
    """
    click.echo(f"{Fore.YELLOW}⚠{Style.RESET_ALL} {msg}")


def format_font(page_number: int, font_key: str, font: ResolvedFont) -> str:
    """Formats the summary line of a resolved font."""
    if isinstance(font.encoding, ExplicitMap):
        kind = f"explicit ({len(font.encoding)} codes)"
    else:
        kind = "passthrough"
    cid = "yes" if font.is_cid else "no"
    return (
        f"Page {page_number} {font_key}: {font.name} "
        f"[cid: {cid}, encoding: {kind}]"
    )


def format_codes(font: ResolvedFont) -> Iterator[str]:
    """Yields one line per mapped character code of a resolved font."""
    if not isinstance(font.encoding, ExplicitMap):
        yield "  codes are glyph ids"
        return
    for code in sorted(font.encoding):
        mapping = font.encoding[code]
        unicode = repr(mapping.unicode) if mapping.unicode is not None else "-"
        yield f"  {code:>5} -> {mapping.gid:>5} {unicode}"


def _select_pages(
    pdf: pikepdf.Pdf, page: int | None
) -> list[tuple[int, pikepdf.Page]]:
    """Returns (1-based page number, page) pairs to inspect.

    Raises:
        click.BadParameter: If ``page`` is out of range.
    """
    if page is None:
        return list(enumerate(pdf.pages, start=1))
    if not 1 <= page <= len(pdf.pages):
        raise click.BadParameter(
            f"page {page} out of range (document has {len(pdf.pages)} pages)",
            param_hint="--page",
        )
    return [(page, pdf.pages[page - 1])]


def _report_fonts(
    input_path: Path,
    page: int | None,
    font_key: str | None,
    show_codes: bool,
    quiet: bool,
) -> int:
    """Resolves and prints the fonts of a PDF.

    Args:
        input_path: Path to the PDF.
        page: 1-based page number, or None for all pages.
        font_key: Only report the font with this resource key (e.g. "F1").
        show_codes: Whether to print the code table of each font.
        quiet: Whether to only output errors.

    Returns:
        Exit code.
    """
    wanted_key = f"/{font_key.lstrip('/')}" if font_key else None
    cache = FontCache()
    resolved_count = 0
    failed_count = 0

    with pikepdf.open(input_path) as pdf:
        for page_number, pdf_page in _select_pages(pdf, page):
            for key, font in iter_page_fonts(pdf_page):
                if wanted_key is not None and key != wanted_key:
                    continue
                try:
                    resolved = cache.get(font)
                except PdfGlyphMapError as e:
                    failed_count += 1
                    if not quiet:
                        print_warning(f"Page {page_number} {key}: {e}")
                    continue

                resolved_count += 1
                if quiet:
                    continue
                click.echo(format_font(page_number, key, resolved))
                if show_codes:
                    for line in format_codes(resolved):
                        click.echo(line)

    if wanted_key is not None and resolved_count + failed_count == 0:
        print_error(f"No font {wanted_key} found in {input_path.name}")
        return EXIT_GENERAL_ERROR

    if failed_count:
        print_error(f"{failed_count} font(s) could not be resolved")
        return EXIT_RESOLUTION_FAILED

    if not quiet:
        print_success(
            f"Resolved {resolved_count} font reference(s), "
            f"{len(cache)} distinct font(s) in {input_path.name}"
        )
    return EXIT_SUCCESS


@click.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option(
    "-p",
    "--page",
    type=click.IntRange(min=1),
    default=None,
    help="Only inspect this page (1-based)",
)
@click.option(
    "-f",
    "--font",
    "font_key",
    default=None,
    help="Only report the font with this resource key, e.g. F1",
)
@click.option(
    "-c",
    "--codes",
    "show_codes",
    is_flag=True,
    help="Print the code -> glyph table of each font",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
@click.version_option(version=__version__)
def main(
    input_path: str,
    page: int | None,
    font_key: str | None,
    show_codes: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Shows how the fonts of a PDF map character codes to glyphs.

    INPUT is the path to the PDF file.
    """
    # Initialize colorama for Windows compatibility
    init()

    setup_logging(verbose=verbose, quiet=quiet)

    input_path_obj = Path(input_path)

    try:
        if not input_path_obj.is_file():
            print_error(f"File not found: {input_path}")
            exit_code = EXIT_FILE_NOT_FOUND
        else:
            exit_code = _report_fonts(
                input_path_obj, page, font_key, show_codes, quiet
            )
    except click.BadParameter as e:
        print_error(e.format_message())
        exit_code = EXIT_GENERAL_ERROR
    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except pikepdf.PasswordError as e:
        print_error(f"PDF is encrypted: {e}")
        exit_code = EXIT_GENERAL_ERROR
    except pikepdf.PdfError as e:
        print_error(f"Cannot read {input_path_obj.name}: {e}")
        exit_code = EXIT_GENERAL_ERROR
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)
