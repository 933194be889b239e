#!/usr/bin/env python3
"""
RAB Report - Command Line Entry Point

Export a cost estimate report (Rencana Anggaran Biaya) stored as JSON to
Excel and/or Word.

Usage:
    python main.py report.json
    python main.py report.json --format xlsx --output-dir exports
    python main.py --list-history
    python main.py --from-history 1735689600000 --format docx
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Set UTF-8 encoding for console output (fixes Windows encoding issues)
if sys.platform == 'win32':
    sys.stdout.reconfigure(encoding='utf-8')

from rab_report import (
    ConsoleReporter,
    ExportError,
    ExportFormat,
    Report,
    ReportExporter,
    ReportHistory,
    ReportMetadata,
)
from rab_report.history import DEFAULT_HISTORY_FILE
from rab_report.utils import format_currency


FORMAT_CHOICES = ['xlsx', 'docx', 'all']


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Export RAB cost estimate reports to Excel and Word",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py report.json
    (Writes <title>.xlsx and <title>.docx to the current folder)
    
  python main.py report.json -f xlsx -o exports --preview
    (Prints a preview and writes only the workbook into exports/)
    
  python main.py --from-history 1735689600000
    (Re-exports a report saved earlier with --save-history)
"""
    )
    
    parser.add_argument('input', nargs='?',
                        help='Path to report JSON file ({"metadata": ..., "items": [...]})')
    parser.add_argument('--format', '-f', dest='format', choices=FORMAT_CHOICES, default='all',
                        help='Output format (default: all)')
    parser.add_argument('--output-dir', '-o', dest='output_dir', default='.',
                        help='Directory for exported files (default: current directory)')
    parser.add_argument('--title', dest='title',
                        help='Override the report title')
    parser.add_argument('--date', dest='date',
                        help='Override the report date')
    parser.add_argument('--preview', '-p', action='store_true',
                        help='Print the report and category breakdown before exporting')
    parser.add_argument('--save-history', action='store_true',
                        help='Save the report to the local history')
    parser.add_argument('--list-history', action='store_true',
                        help='List saved reports and exit')
    parser.add_argument('--from-history', dest='from_history', type=int,
                        help='Export a saved report by id instead of an input file')
    parser.add_argument('--history-file', dest='history_file', default=str(DEFAULT_HISTORY_FILE),
                        help=f'History file location (default: {DEFAULT_HISTORY_FILE})')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    
    return parser


def selected_formats(choice: str) -> List[ExportFormat]:
    """Map the --format choice to export formats."""
    if choice == 'all':
        return [ExportFormat.SPREADSHEET, ExportFormat.DOCUMENT]
    return [ExportFormat.parse(choice)]


def load_report(path: str) -> Report:
    """Load a report from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return Report.from_dict(json.load(f))


def apply_overrides(report: Report, title: Optional[str], date: Optional[str]) -> Report:
    """Return a copy of the report with metadata overrides applied."""
    if title is None and date is None:
        return report
    metadata = ReportMetadata(
        title=report.metadata.title if title is None else title,
        date=report.metadata.date if date is None else date,
    )
    return Report(metadata=metadata, items=report.items)


def print_history(history: ReportHistory):
    """Print saved reports, newest first."""
    entries = history.list()
    if not entries:
        print("[*] No saved reports.")
        return
    print(f"[*] Saved reports ({len(entries)}):")
    for report_id, metadata in entries:
        count = history.item_count(report_id)
        print(f"   {report_id}  {metadata.display_title:<30} {metadata.date:<12} {count} baris")


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the exporter. Returns the process exit code."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    
    history = ReportHistory(args.history_file)
    
    if args.list_history:
        print_history(history)
        return 0
    
    # Load the report
    try:
        if args.from_history is not None:
            report = history.load(args.from_history)
            print(f"[+] Loaded saved report {args.from_history}")
        elif args.input:
            report = load_report(args.input)
            print(f"[+] Loaded report from: {args.input}")
        else:
            parser.print_usage()
            print("[ERROR] Provide an input JSON file or --from-history ID.")
            return 1
    except KeyError as e:
        print(f"[ERROR] {e.args[0]}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"[ERROR] Could not read report: {e}")
        return 1
    
    report = apply_overrides(report, args.title, args.date)
    print(f"    Items: {len(report.items)}")
    print(f"    Grand total: {format_currency(report.grand_total)}")
    
    if args.preview:
        console = ConsoleReporter()
        console.print_preview(report)
        console.print_category_breakdown(report)
    
    if args.save_history:
        report_id = history.save(report)
        print(f"[+] Saved to history as {report_id}")
    
    # Export
    exporter = ReportExporter()
    try:
        results = asyncio.run(exporter.build_many(report, selected_formats(args.format)))
    except ExportError as e:
        print(f"[ERROR] Export failed: {e}")
        return 1
    
    for result in results:
        try:
            path = exporter.save(result, args.output_dir)
        except OSError as e:
            print(f"[ERROR] Could not write {result.filename}: {e}")
            return 1
        print(f"[OK] {result.format.value.upper()} exported to: {path}")
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
