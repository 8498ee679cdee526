"""
Translation status statistics and report rendering
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from locale_sync.services.diff_resolver import find_missing_keys
from locale_sync.services.directory_service import DirectoryStructure, load_pair
from locale_sync.utils.errors import DocumentIOError

logger = logging.getLogger(__name__)


@dataclass
class FileStats:
    """Translation statistics for one target file"""
    source_count: int
    missing_count: int
    empty_count: int
    target_exists: bool = True
    extra_count: int = 0

    @property
    def translated(self) -> int:
        return self.source_count - self.missing_count - self.empty_count

    @property
    def percent_done(self) -> float:
        if self.source_count == 0:
            return 100.0
        return self.translated / self.source_count * 100


@dataclass
class StatusReport:
    """Statistics for every target language and file type"""
    source_lang: str
    target_langs: List[str]
    total_source_keys: int = 0
    files: Dict[str, Dict[str, FileStats]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def language_totals(self, lang: str) -> FileStats:
        stats = self.files.get(lang, {}).values()
        return FileStats(
            source_count=sum(s.source_count for s in stats),
            missing_count=sum(s.missing_count for s in stats),
            empty_count=sum(s.empty_count for s in stats)
        )


def collect_status(ds: DirectoryStructure, target_langs: Optional[Iterable[str]] = None) -> StatusReport:
    """
    Compute missing and empty key counts for every target file

    Args:
        ds: Scanned directory structure
        target_langs: Languages to include (all but the source when empty)
    """
    pairs = ds.target_pairs(target_langs)
    languages = sorted({pair.target_lang for pair in pairs})
    report = StatusReport(source_lang=ds.source_lang, target_langs=languages)

    counted_types = set()
    for pair in pairs:
        try:
            source, target = load_pair(pair)
        except DocumentIOError as e:
            logger.error(f"Error loading pair: {e}")
            report.errors[pair.target_file] = str(e)
            continue

        if pair.file_type not in counted_types:
            counted_types.add(pair.file_type)
            report.total_source_keys += len(source.items)

        missing = find_missing_keys(source.items, target.items)
        empty = sum(1 for key, value in target.items.items() if key in source.items and value == '')

        report.files.setdefault(pair.target_lang, {})[pair.file_type] = FileStats(
            source_count=len(source.items),
            missing_count=len(missing),
            empty_count=empty,
            target_exists=pair.target_exists,
            extra_count=sum(1 for key in target.items if key not in source.items)
        )

    return report


def _row(label: str, stats: FileStats) -> str:
    return (
        f"| {label} | {stats.source_count} | {stats.translated} | {stats.missing_count} "
        f"| {stats.empty_count} | {stats.percent_done:.1f}% |\n"
    )


def render_status_report(report: StatusReport, generated_at: Optional[datetime] = None) -> str:
    """Render a StatusReport as Markdown"""
    generated_at = generated_at or datetime.now()
    lines = [
        "# Translation Status Report\n\n",
        f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n\n",
        f"Source Language: {report.source_lang}\n",
        f"Target Languages: {len(report.target_langs)}\n",
        f"Total Source Keys: {report.total_source_keys}\n\n",
        "## Summary\n\n",
        "| Language | Total Keys | Translated | Missing | Empty | Percent Complete |\n",
        "|----------|------------|------------|---------|-------|------------------|\n",
    ]

    for lang in report.target_langs:
        if lang in report.files:
            lines.append(_row(lang, report.language_totals(lang)))

    lines.append("\n## Details\n\n")
    for lang in report.target_langs:
        lines.append(f"### {lang}\n\n")
        lines.append("| File | Total Keys | Translated | Missing | Empty | Percent Complete |\n")
        lines.append("|------|------------|------------|---------|-------|------------------|\n")
        for file_type, stats in sorted(report.files.get(lang, {}).items()):
            lines.append(_row(file_type, stats))
        lines.append("\n")

    return ''.join(lines)
