"""
Command-line interface for the Paper Composer.

Usage:
    paper-composer render <document.json> --format {docx,pdf,layout} [options]
    paper-composer share encode <document.json> [--base-url URL]
    paper-composer share decode <fragment_or_url>

Examples:
    # Word export of a transcription result
    paper-composer render paper.json --format docx --out ./output

    # Print rendering of an Urdu paper with a registered Nastaliq font
    paper-composer render paper.json --format pdf --language ur --config composer.json

    # Share link round trip
    paper-composer share encode paper.json --base-url https://example.org/editor
    paper-composer share decode "https://example.org/editor#eyJ0aXRsZSI6..."
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from paper_composer import __version__
from paper_composer.config import ComposerConfig, load_config
from paper_composer.controller import ExportError, export_docx, export_layout, export_pdf
from paper_composer.core.editing import update_document
from paper_composer.core.models import ExamDocument, HeaderTemplate
from paper_composer.core.schemas import ValidationError
from paper_composer.core.utils import build_share_url, decode_share_payload, deserialize_document, encode_share_payload
from paper_composer.layout import register_fonts

logger = logging.getLogger("paper_composer")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2

FORMATS = ("docx", "pdf", "layout")


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="paper-composer",
        description="Render transcribed exam papers to DOCX, PDF or a JSON layout tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render a document JSON file")
    render.add_argument("input", type=Path, help="Document or transcription JSON")
    render.add_argument("--format", "-f", choices=FORMATS, default="docx", help="Output format")
    render.add_argument("--out", "-o", type=Path, help="Output directory (default from config)")
    render.add_argument("--language", "-l", help="Language tag overriding the document (EN, UR, AR)")
    render.add_argument(
        "--template", "-t",
        choices=[t.value.lower() for t in HeaderTemplate],
        type=str.lower,
        help="Header template overriding the document",
    )
    render.add_argument("--config", "-c", type=Path, help="Composer config JSON")
    render.add_argument("--no-footer", action="store_true", help="Omit the credit line on printed pages")

    share = commands.add_parser("share", help="Encode or decode share links")
    share_commands = share.add_subparsers(dest="share_command", required=True)

    encode = share_commands.add_parser("encode", help="Print a share link for a document")
    encode.add_argument("input", type=Path, help="Document JSON")
    encode.add_argument("--base-url", default="", help="Editor URL the fragment is appended to")

    decode = share_commands.add_parser("decode", help="Print the document JSON of a share link")
    decode.add_argument("payload", help="Payload, #fragment or full share URL")

    return parser


def load_input(
    path: Path,
    config: ComposerConfig,
    *,
    language: Optional[str] = None,
    template: Optional[str] = None,
) -> ExamDocument:
    """
    Load a document file, applying config defaults and CLI overrides.

    Config defaults apply only where the file carries no value; explicit
    CLI options always win.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValidationError("Document must be an object", path="$")

    if language is None and not data.get("language"):
        language = config.default_language
    document = deserialize_document(data, language=language)

    if template is None and not data.get("headerTemplate"):
        template = config.default_template
    if template is not None:
        document = update_document(document, header_template=template)
    return document


def cmd_render(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if config.fonts:
        register_fonts(config.fonts)

    try:
        document = load_input(args.input, config, language=args.language, template=args.template)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Cannot load {args.input}: {e}")
        return EXIT_BAD_INPUT

    output_dir = args.out or config.output_dir
    try:
        if args.format == "docx":
            result = export_docx(document, output_dir)
        elif args.format == "pdf":
            result = export_pdf(
                document, output_dir,
                config=config.layout,
                show_footer=config.show_footer and not args.no_footer,
            )
        else:
            result = export_layout(document, output_dir, config=config.layout)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        return EXIT_FAILED

    for warning in result.warnings:
        logger.warning(warning)
    print(result.path)
    return EXIT_OK


def cmd_share_encode(args: argparse.Namespace) -> int:
    try:
        data = json.loads(args.input.read_text(encoding="utf-8"))
        document = deserialize_document(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Cannot load {args.input}: {e}")
        return EXIT_BAD_INPUT

    if args.base_url:
        print(build_share_url(document, args.base_url))
    else:
        print(encode_share_payload(document))
    return EXIT_OK


def cmd_share_decode(args: argparse.Namespace) -> int:
    document = decode_share_payload(args.payload)
    if document is None:
        logger.error("Share payload could not be decoded")
        return EXIT_FAILED

    print(json.dumps(document.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "render":
        return cmd_render(args)
    if args.share_command == "encode":
        return cmd_share_encode(args)
    return cmd_share_decode(args)


if __name__ == "__main__":
    sys.exit(main())
