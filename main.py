#!/usr/bin/env python3
"""
Main entry point for the Feedback Text Parser System.

Reads feedback text (pasted text files, inline text or stdin) or photographed
feedback documents (JPEG, PNG, WebP) and prints the categorized feedback entries.

Usage:
    python main.py [INPUT ...] [options]

Examples:
    # Parse a text file produced by Google Lens or typed by hand
    python main.py ./feedback.txt

    # Parse inline text
    python main.py --text "##Positive## Great leadership. ##Needs Improvement## Time management."

    # Read from stdin
    cat feedback.txt | python main.py -

    # Transcribe a photo with the OCR service and print JSON
    python main.py ./photo.jpg --format json

Environment Variables (only needed for images):
    OPENAI_API_KEY: API key for the vision OCR service

Optional Environment Variables:
    OPENAI_API_URL: API URL (default: https://api.openai.com/v1)
    OCR_MODEL: Vision model name (default: gpt-4o)
    REQUEST_TIMEOUT: API request timeout in seconds (default: 60)
    OCR_ATTEMPTS: Number of transcription attempts (default: 2)
    MAX_IMAGE_SIZE_MB: Maximum image size in MB (default: 10)
    SUPPORTED_IMAGE_FORMATS: Accepted image extensions (default: jpeg,jpg,png,webp)
    CONTRAST_FACTOR: Contrast boost applied before OCR (default: 1.2)
    LOG_LEVEL: Logging level (default: INFO)
"""

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from feedback_text_parser import __version__
from feedback_text_parser.config.config_manager import ConfigManager, ConfigurationError
from feedback_text_parser.models.feedback_data import ProcessingResult


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="feedback-text-parser",
        description="Convert feedback document text or photos into categorized feedback entries",
        epilog="""
Supported section markers:
  ##Positive##   #Needs Improvement#   [Observational]   **Positive**   Observational:

Examples:
  %(prog)s ./feedback.txt
  %(prog)s ./photo.jpg --format json
  %(prog)s --text "##Positive## Great leadership."
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="INPUT",
        help="Text files, images (JPEG, PNG, WebP) or '-' for stdin"
    )

    parser.add_argument(
        "--text", "-t",
        action="append",
        default=[],
        metavar="TEXT",
        help="Parse the given text directly (may be repeated)"
    )

    parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )

    parser.add_argument(
        "--no-preprocess",
        action="store_true",
        help="Send images to OCR without grayscale/contrast enhancement"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output except errors"
    )

    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write logs to the specified file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Feedback Text Parser {__version__}"
    )

    return parser


def validate_arguments(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """
    Validate command-line arguments; exits with status 2 on usage errors.

    Args:
        parser: Parser used to report errors
        args: Parsed command-line arguments
    """
    if not args.inputs and not args.text:
        parser.error("provide at least one INPUT or --text")

    if args.verbose and args.quiet:
        parser.error("cannot use both --verbose and --quiet")

    if args.inputs.count("-") > 1:
        parser.error("stdin ('-') can only be given once")


def format_result_text(result: ProcessingResult) -> str:
    """Render one processing result as human-readable lines."""
    lines = [f"== {result.source} ({result.status})"]

    if result.error_message:
        lines.append(f"✗ {result.error_message}")
    elif not result.has_data():
        lines.append("No feedback sections found")
    else:
        for entry in result.data:
            lines.append(f"[{entry.category.label}] {entry.text}")

    return "\n".join(lines)


def process_inputs(args: argparse.Namespace, config_manager: ConfigManager, error_handler=None) -> List[ProcessingResult]:
    """
    Run every input through the extraction pipeline, in command-line order.

    Args:
        args: Parsed command-line arguments
        config_manager: Loaded configuration
        error_handler: ErrorHandler collecting failures

    Returns:
        List of ProcessingResult, one per input
    """
    from feedback_text_parser.services.feedback_extractor import FeedbackExtractor

    extractor = FeedbackExtractor(
        config_manager=config_manager,
        error_handler=error_handler,
        preprocess_images=not args.no_preprocess
    )

    results = []

    for index, text in enumerate(args.text, start=1):
        results.append(extractor.extract_from_text(text, source=f"text-{index}"))

    for input_name in args.inputs:
        if input_name == "-":
            results.append(extractor.extract_from_text(sys.stdin.read(), source="stdin"))
            continue

        input_path = Path(input_name)

        if extractor.validator.is_image_path(input_path):
            results.append(extractor.extract_from_image(input_path))
            continue

        try:
            raw_text = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            extractor.error_handler.handle_file_error(str(input_path), e, operation="read")
            results.append(ProcessingResult(source=input_path.name, status="fail", error_message=str(e)))
            continue

        results.append(extractor.extract_from_text(raw_text, source=input_path.name))

    return results


def main(argv: Optional[List[str]] = None):
    """Main application entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    validate_arguments(parser, args)

    try:
        config_manager = ConfigManager()

        if args.verbose:
            log_level = "DEBUG"
        elif args.quiet:
            log_level = "ERROR"
        else:
            log_level = config_manager.get_log_level()

        from feedback_text_parser.utils.logging_config import setup_logging
        logging_config, error_handler = setup_logging(
            log_level=log_level,
            log_file=args.log_file,
            enable_console=True
        )

        results = process_inputs(args, config_manager, error_handler)

    except ConfigurationError as e:
        print(f"✗ Configuration Error: {e}", file=sys.stderr)
        print("Check the environment variables and .env file settings", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n⚠ Processing interrupted by user", file=sys.stderr)
        sys.exit(130)

    if args.format == "json":
        print(json.dumps([result.to_dict() for result in results], indent=2, ensure_ascii=False))
    else:
        print("\n\n".join(format_result_text(result) for result in results))

    error_handler.log_error_summary()

    if any(not result.is_successful() for result in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
