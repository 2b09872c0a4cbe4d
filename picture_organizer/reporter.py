"""Reporting and statistics for organizing runs."""

import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .utils import format_bytes

logger = logging.getLogger(__name__)


class OrganizeReporter:
    """Generates the completion summary of an organizing run."""

    def __init__(self, max_failures: int = 50):
        """
        Initialize reporter.

        Args:
            max_failures: Number of failures listed before the list is cut short
        """
        self.max_failures = max_failures

    def generate_summary_report(self, results: Dict[str, Any]) -> str:
        """
        Generate human-readable summary report.

        Args:
            results: Results from DirectoryOrganizer.organize

        Returns:
            Formatted summary report
        """
        report = []
        report.append("=" * 50)
        report.append("PICTURE ORGANIZER SUMMARY REPORT")
        report.append("=" * 50)
        report.append(f"Completed: {results.get('timestamp', 'Unknown')}")
        report.append(f"Mode: {'DRY RUN' if results.get('dry_run', False) else 'LIVE RUN'}")
        if results.get('cancelled'):
            report.append("Run was cancelled before all files were processed")
        report.append("")

        report.append("=== DIRECTORIES ===")
        for root in results.get('input_roots', []):
            report.append(f"Input: {root}")
        report.append(f"Output: {results.get('output_root', 'N/A')}")
        report.append("")

        report.append("=== FILE STATISTICS ===")
        report.append(f"• Files processed: {results.get('processed_files', 0):,} / {results.get('total_files', 0):,}")
        report.append(f"• Copied: {results.get('copied_files', 0):,} ({format_bytes(results.get('copied_size', 0))})")
        report.append(f"• Skipped duplicates: {results.get('duplicate_files', 0):,}")
        report.append(f"• Skipped by extension: {results.get('skipped_extension', 0):,}")
        report.append(f"• Skipped hidden: {results.get('skipped_hidden', 0):,}")
        report.append(f"• Invalid names: {results.get('invalid_names', 0):,}")
        report.append(f"• Missing directories: {results.get('missing_directories', 0):,}")
        report.append(f"• Failed: {results.get('failed_files', 0):,}")
        report.append("")

        errors = results.get('errors', [])
        if errors:
            report.append("=== PROBLEMS ENCOUNTERED ===")
            for error in errors[:self.max_failures]:
                report.append(f"- {error}")
            if len(errors) > self.max_failures:
                report.append(f"- ... and {len(errors) - self.max_failures} more")
            report.append("")

        status = "COMPLETE" if results.get('success', not errors) else "COMPLETED WITH ISSUES"
        report.append(f"STATUS: {status}")

        return "\n".join(report)

    def save_report(self, results: Dict[str, Any], report_file: Optional[str] = None) -> str:
        """
        Save the summary report to a file.

        Args:
            results: Results dictionary
            report_file: Target path; defaults to a timestamped file in the output root

        Returns:
            Path to saved report file
        """
        if report_file is None:
            timestamp = results.get('timestamp', 'unknown').replace(':', '-')
            report_path = Path(results.get('output_root', '.')) / f"organize_report_{timestamp}.txt"
        else:
            report_path = Path(report_file)
        report_path.parent.mkdir(parents=True, exist_ok=True)

        report_content = self.generate_summary_report(results)

        try:
            with open(report_path, 'w', encoding='utf-8') as f:
                f.write(report_content)

            logger.info(f"Report saved: {report_path}")
            return str(report_path)

        except Exception as e:
            logger.error(f"Failed to save report: {e}")
            raise
