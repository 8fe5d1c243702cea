"""Command-line entry point for linguaisync."""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

from linguaisync import __version__
from linguaisync.config import Settings, load_config
from linguaisync.errors import ConfigurationError, LinguaSyncError, ValidationError
from linguaisync.provider import OpenAIProvider
from linguaisync.storage import TranslationFileStore
from linguaisync.sync import AnalysisReporter, SyncOrchestrator, format_verbose


def setup_logging(debug: bool = False) -> None:
    """Route structlog events through stdlib logging on stderr.

    Stdout is left to the dry-run listing. Debug runs get the console
    renderer, otherwise each event is one JSON line.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )
    # the OpenAI client logs every HTTP request through httpx
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)

    if debug:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="linguaisync",
        description="AI-powered translation synchronization for JSON locale files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Expected structure:\n"
            "  locales/\n"
            "    en/translation.json\n"
            "    es/translation.json\n"
        ),
    )

    parser.add_argument("--version", action="version", version=f"linguaisync {__version__}")
    parser.add_argument("--all", action="store_true", help="Update all available languages")
    parser.add_argument("--lang", help="Comma-separated language codes to update (e.g. jp,el,de)")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be updated without making changes")
    parser.add_argument("--verbose", action="store_true", help="List every pending translation in dry-run mode")
    parser.add_argument("--output", type=Path, help="Save the dry-run report to a JSON file")
    parser.add_argument("--config", type=Path, help="Path to a JSON or YAML configuration file")
    parser.add_argument("--locales-dir", type=Path, help="Locales directory (overrides config file)")
    parser.add_argument("--base-lang", help="Base language code (overrides config file)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if args.output and not args.dry_run:
        parser.error("--output requires --dry-run")
    return args


def resolve_languages(args: argparse.Namespace, available: List[str]) -> List[str]:
    """Languages selected on the command line, validated against ``available``.

    Raises:
        ValidationError: if nothing usable was selected
    """
    if args.all:
        if not available:
            raise ValidationError("No language directories found", field="all")
        return list(available)

    if not args.lang:
        hint = ", ".join(available) if available else "none found"
        raise ValidationError(f"No languages specified. Use --all or --lang. Available: {hint}", field="lang")

    languages = [code.strip() for code in args.lang.split(",") if code.strip()]
    if not languages:
        raise ValidationError("No valid languages to process", field="lang", value=args.lang)

    invalid = [code for code in languages if code not in available]
    if invalid:
        raise ValidationError(
            f"Invalid language codes: {', '.join(invalid)}. Available: {', '.join(available)}",
            field="lang",
            value=args.lang,
        )
    return languages


def build_settings(args: argparse.Namespace) -> Settings:
    overrides: Dict[str, object] = {
        "locales_dir": args.locales_dir.resolve() if args.locales_dir else None,
        "base_language": args.base_lang,
    }
    return load_config(config_file=args.config, overrides=overrides)


async def run_dry_run(settings: Settings, languages: List[str], args: argparse.Namespace) -> int:
    logger = structlog.get_logger()
    logger.info("Dry run: no files will be modified")

    reporter = AnalysisReporter(settings)
    analyses = await reporter.analyze_languages(languages)
    report = reporter.build_report(analyses)

    if args.verbose:
        for code, entry in report["languages"].items():
            print(format_verbose(code, entry["missing"], entry["languageName"]))

    if analyses:
        logger.info(
            "Dry run summary",
            total_missing=report["summary"]["totalMissingTranslations"],
            languages=report["summary"]["totalLanguages"],
        )

    if args.output and analyses:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
            logger.info("Report saved", file=str(args.output))
        except OSError as e:
            logger.error("Error saving report", file=str(args.output), error=str(e))

    return 0


async def run_sync(settings: Settings, languages: List[str]) -> int:
    logger = structlog.get_logger()
    provider = OpenAIProvider(settings)
    orchestrator = SyncOrchestrator(settings, provider)

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, cancel_event.set)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handlers not supported", signal=signum)

    try:
        summary = await orchestrator.sync_languages(languages, cancel_event)
    finally:
        await provider.close()

    logger.info("Completed", updated=summary.succeeded, languages=len(languages))
    return 0 if summary.succeeded else 1


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    logger = structlog.get_logger()
    logger.info("Starting linguaisync", version=__version__)

    try:
        settings = build_settings(args)
        logger.info(
            "Configuration loaded",
            locales_dir=str(settings.locales_dir),
            base_language=settings.base_language,
            files=settings.translation_files,
        )

        available = await TranslationFileStore(settings.locales_dir, settings.base_language).available_languages()
        languages = resolve_languages(args, available)

        if args.dry_run:
            return await run_dry_run(settings, languages, args)
        return await run_sync(settings, languages)

    except ConfigurationError as e:
        logger.error("Configuration error", error=str(e))
        return 1
    except LinguaSyncError as e:
        logger.error(e.message, **e.context)
        return 1


def run() -> None:
    """Synchronous entry point for the console script."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
