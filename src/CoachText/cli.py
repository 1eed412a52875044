from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import message_parser, renderer_docx, renderer_html
from .config import FormatterConfig, load_config
from .utils import configure_logging, read_message, resolve_output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="CoachText",
        description="Format coaching-model replies into styled HTML or DOCX.",
    )
    parser.add_argument("input", type=str, help="Path to the message text file")
    parser.add_argument("-o", "--output", type=str, help="Output path (.html or .docx)")
    parser.add_argument("--config", type=str, help="YAML file with formatter settings")
    parser.add_argument("--analyze", action="store_true", help="Log coaching cues found in the message")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    output_path = resolve_output_path(input_path, args.output)
    config = load_config(Path(args.config).expanduser()) if args.config else FormatterConfig()

    logging.info("Reading %s", input_path)
    text = read_message(input_path)
    logging.debug("Message length: %d chars", len(text))

    logging.info("Formatting message...")
    document = message_parser.parse_message(text, config, analyze=args.analyze)
    logging.debug("Built %d blocks", len(document.blocks))
    if args.analyze:
        _log_analysis(document.metadata["analysis"])

    if output_path.suffix.lower() == ".docx":
        logging.info("Rendering DOCX to %s", output_path)
        renderer_docx.render_document(document, output_path=output_path, config=config)
    else:
        logging.info("Rendering HTML to %s", output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(renderer_html.render_html(document, config), encoding="utf-8")

    logging.info("Done. Saved to %s", output_path)


def _log_analysis(analysis) -> None:
    logging.info("Challenges: %s", ", ".join(analysis.main_challenges))
    logging.info("Suggested approaches: %s", ", ".join(analysis.suggested_approaches))
    logging.info("Confidence score: %d", analysis.confidence_score)
    logging.info("Target skill: %s", analysis.target_skill)


if __name__ == "__main__":
    main()
