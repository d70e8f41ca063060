"""
Export functionality for TalentMatch - write ranked match results to CSV or JSON.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .config import get_config_manager
from .engine import MatchOutcome

console = Console()

SUPPORTED_FORMATS = ("csv", "json")


class ExportManager:
    """Handles match result export in multiple formats."""

    def __init__(self, score_precision: Optional[int] = None,
                 output_directory: Optional[str] = None):
        config = get_config_manager()
        if score_precision is None:
            score_precision = config.get('matching', 'score_precision')
        if output_directory is None:
            output_directory = config.get('export', 'output_directory')
        self.score_precision = score_precision
        self.output_directory = Path(output_directory)
        self.include_timestamps = config.get('export', 'include_timestamps')

    def export_match_results(self,
                             outcome: MatchOutcome,
                             format: Optional[str] = None,
                             output_path: Optional[str] = None) -> str:
        """
        Export match results in specified format.

        Args:
            outcome: Result of a matching run
            format: Export format ('csv' or 'json'), defaults to configuration
            output_path: Custom output file path

        Returns:
            Path to generated file
        """
        if format is None:
            format = get_config_manager().get('export', 'default_format')
        if format not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported export format: {format}")

        if not output_path:
            suffix = f"_{datetime.now().strftime('%Y%m%d_%H%M%S')}" if self.include_timestamps else ""
            stem = f"job_{outcome.job_id}" if outcome.job_id is not None else "description"
            output_path = str(self.output_directory / f"talentmatch_{stem}{suffix}.{format}")

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        rows = self._rows(outcome)
        if format == 'csv':
            self._write_csv(rows, output_file)
        else:
            self._write_json(outcome, rows, output_file)

        console.print(f"[green]✓ Exported {len(rows)} matches to {output_file}[/green]")
        return str(output_file)

    def _rows(self, outcome: MatchOutcome):
        rows = []
        for rank, result in enumerate(outcome.results, start=1):
            candidate = result.candidate
            rows.append({
                "rank": rank,
                "job_id": outcome.job_id,
                "candidate_id": result.item_id,
                "candidate_name": candidate.name if candidate else "",
                "skills": candidate.skills if candidate else "",
                "similarity_score": (round(result.score, self.score_precision)
                                     if result.score is not None else None),
                "source": outcome.source,
            })
        return rows

    def _write_csv(self, rows, output_file: Path) -> None:
        fieldnames = ["rank", "job_id", "candidate_id", "candidate_name",
                      "skills", "similarity_score", "source"]
        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)

    def _write_json(self, outcome: MatchOutcome, rows, output_file: Path) -> None:
        data = {
            "export_info": {
                "timestamp": datetime.now().isoformat(),
                "job_id": outcome.job_id,
                "source": outcome.source,
                "total_results": len(rows),
            },
            "matches": rows,
        }
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


def get_export_manager() -> ExportManager:
    """Get export manager instance."""
    return ExportManager()
