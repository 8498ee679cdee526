"""
Main application entry point
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from locale_sync.config import Settings, create_default_config, load_config_file, reload_settings
from locale_sync.config.load_config import DEFAULT_CONFIG_PATH
from locale_sync.models.document import LocaleDocument
from locale_sync.models.sync import RunSummary
from locale_sync.services.directory_service import (
    ensure_target_directories,
    language_code_from_path,
    scan_directory,
    scan_flat_directory,
)
from locale_sync.services.status_service import collect_status, render_status_report
from locale_sync.services.sync_service import SyncService, create_strategy
from locale_sync.services.translation_service import TranslationService
from locale_sync.utils.errors import ConfigError, DocumentIOError, LocaleSyncError, SourceLoadError
from locale_sync.utils.file_utils import FileManager
from locale_sync.utils.logging_setup import setup_logging
from locale_sync.utils.progress import ConsoleProgress

logger = logging.getLogger(__name__)


class LocaleSyncApp:
    """Main application class"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.translator = TranslationService(settings.translator)
        self.file_manager = FileManager(settings.sync.failed_keys_dir)
        self.progress = ConsoleProgress()

    def _load_override(self) -> Optional[LocaleDocument]:
        path = self.settings.sync.override_file
        if not path:
            return None
        override = LocaleDocument.parse_file(path)
        logger.info(f"Loaded {len(override.items)} override entries from {path}")
        return override

    async def sync(self) -> RunSummary:
        """Scan the locale root and synchronize every target file"""
        cfg = self.settings.sync

        print(f"🔍 Scanning directory: {cfg.root_dir} (source: {cfg.source_lang})")
        ds = scan_directory(cfg.root_dir, cfg.source_lang, cfg.include_files, cfg.exclude_files)
        print(f"✅ Found {len(ds.languages)} languages and {len(ds.file_types)} file types")
        print(f"🌍 Languages: {ds.languages}")
        print(f"📄 File types: {ds.file_types}")

        missing_pairs = ds.find_missing_pairs()
        if missing_pairs:
            print(f"⚠️ Found {len(missing_pairs)} missing files")
            ensure_target_directories(missing_pairs)

        pairs = ds.target_pairs(cfg.target_langs)
        print(f"🔄 Processing {len(pairs)} file pairs")
        return await self._run_pairs(pairs)

    async def translate(self, source_file: str, directory: str) -> RunSummary:
        """Translate every sibling locale file of a flat directory from one source file"""
        try:
            source = LocaleDocument.parse_file(source_file, code=language_code_from_path(source_file))
        except DocumentIOError as e:
            raise SourceLoadError(f"error parsing source file {source_file}: {e}", source_file) from e

        print(f"📝 source: {len(source.items)} records")
        pairs = scan_flat_directory(directory, source_file)
        print("🌐 Generating locale files:")
        return await self._run_pairs(pairs)

    async def _run_pairs(self, pairs) -> RunSummary:
        cfg = self.settings.sync
        strategy = create_strategy(
            self.translator,
            cfg.batch_size,
            file_manager=self.file_manager,
            progress=self.progress
        )
        service = SyncService(
            strategy,
            mode=cfg.mode,
            override=self._load_override(),
            on_result=self.progress.finish
        )

        try:
            summary = await service.run(pairs)
        finally:
            await self.translator.close()

        self._print_summary(summary)
        return summary

    def _print_summary(self, summary: RunSummary):
        total = summary.total_keys or 1
        print("\n📊 Summary:")
        print(f"- Files processed: {summary.completed_files}/{summary.total_files}")
        print(f"- Total keys: {summary.total_keys}")
        print(f"- Translated keys: {summary.translated_keys} ({summary.translated_keys / total * 100:.1f}%)")
        print(f"- Failed keys: {summary.failed_keys} ({summary.failed_keys / total * 100:.1f}%)")
        for path, error in summary.errors.items():
            print(f"❌ {path}: {error}")
        print("\n✅ Sync completed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='locale-sync', description='Synchronize locale files with machine translation')
    subparsers = parser.add_subparsers(dest='command', required=True)

    sync_parser = subparsers.add_parser('sync', help='Synchronize translations across languages')
    sync_parser.add_argument('--root', required=True, help='Root directory containing language subdirectories')
    sync_parser.add_argument('--source', help='Source language code (default: en)')
    sync_parser.add_argument('--mode', choices=['full', 'missing'], help="Translation mode (default: missing)")
    sync_parser.add_argument('--batch', type=int, help='Batch size; 0 translates one value at a time')
    sync_parser.add_argument('--config', help='Path to configuration file')
    sync_parser.add_argument('--override', help='Locale file whose values replace translations')
    sync_parser.add_argument('--failed-keys-dir', help='Directory for failed key lists')

    translate_parser = subparsers.add_parser('translate', help='Translate sibling locale files of a flat directory')
    translate_parser.add_argument('--source', required=True, help='The source language file')
    translate_parser.add_argument('--dir', required=True, help='The directory of language files')
    translate_parser.add_argument('--independent', help='Locale file whose values replace translations')
    translate_parser.add_argument('--batch', type=int, help='Batch size; 0 translates one value at a time')
    translate_parser.add_argument('--mode', choices=['full', 'missing'], default='full',
                                  help="Translation mode (default: full)")
    translate_parser.add_argument('--config', help='Path to configuration file')
    translate_parser.add_argument('--failed-keys-dir', help='Directory for failed key lists')

    status_parser = subparsers.add_parser('status', help='Show translation status')
    status_parser.add_argument('--root', required=True, help='Root directory containing language subdirectories')
    status_parser.add_argument('--source', default=None, help='Source language code (default: en)')
    status_parser.add_argument('--config', help='Path to configuration file')
    status_parser.add_argument('--output', help='Save report to file (markdown format)')

    init_parser = subparsers.add_parser('init', help='Create a configuration file')
    init_parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, help='Path to configuration file')
    init_parser.add_argument('--force', action='store_true', help='Override existing configuration file')
    init_parser.add_argument('--source', default='en', help='Source language code')
    init_parser.add_argument('--targets', default='', help='Target language codes (comma-separated)')

    return parser


def run_init(args) -> int:
    targets = [t.strip() for t in args.targets.split(',') if t.strip()]
    written = create_default_config(args.config, force=args.force, source_lang=args.source, target_langs=targets)
    if not written:
        print(f"⚠️ Configuration file {args.config} already exists. Use --force to override.")
        return 1
    print(f"✅ Configuration file created at {args.config}")
    print(f"💡 Run: locale-sync sync --root=./locales --config={args.config}")
    return 0


def run_status(args) -> int:
    source_lang = args.source
    target_langs: List[str] = []
    if args.config:
        try:
            config_file = load_config_file(args.config)
            source_lang = source_lang or config_file.source_lang
            target_langs = config_file.target_langs
        except FileNotFoundError:
            logger.warning(f"Configuration file {args.config} not found, using defaults")
    source_lang = source_lang or 'en'

    print(f"🔍 Scanning directory: {args.root} (source: {source_lang})")
    ds = scan_directory(args.root, source_lang)
    report = render_status_report(collect_status(ds, target_langs))
    print("\n" + report)

    if args.output:
        FileManager().write_text(args.output, report)
        print(f"✅ Report saved to {args.output}")
    return 0


def run_sync(args) -> int:
    settings = reload_settings(args.config, {
        'root_dir': args.root,
        'source_lang': args.source,
        'mode': args.mode,
        'batch_size': args.batch,
        'override_file': args.override,
        'failed_keys_dir': args.failed_keys_dir,
    })
    setup_logging(settings.sync.log_level, settings.sync.log_dir)

    app = LocaleSyncApp(settings)
    summary = asyncio.run(app.sync())
    return 1 if summary.errors else 0


def run_translate(args) -> int:
    settings = reload_settings(args.config, {
        'root_dir': args.dir,
        'mode': args.mode,
        'batch_size': args.batch,
        'override_file': args.independent,
        'failed_keys_dir': args.failed_keys_dir,
    })
    setup_logging(settings.sync.log_level, settings.sync.log_dir)

    app = LocaleSyncApp(settings)
    summary = asyncio.run(app.translate(args.source, args.dir))
    return 1 if summary.errors else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    if args.command not in ('sync', 'translate'):
        setup_logging('INFO', None)

    try:
        if args.command == 'init':
            return run_init(args)
        if args.command == 'status':
            return run_status(args)
        if args.command == 'translate':
            return run_translate(args)
        return run_sync(args)
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        return 2
    except LocaleSyncError as e:
        print(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130


def run():
    sys.exit(main())


if __name__ == '__main__':
    run()
