"""CSV file operations for the Pivotal Tracker importer."""

import io
import re
from pathlib import Path
from typing import Optional, Sequence, Tuple
import pandas as pd
from rich.console import Console

from ..config.settings import ExportOptions
from ..models.task import TaskRecord

console = Console()

ALL_PROJECTS_NAME = "All Projects"

# Quoted cells are kept as is, bare \r\n between records becomes \n
_RECORD_END = re.compile(r'("(?:[^"]|"")*")|\r\n')


class CsvService:
    """Service for Pivotal CSV serialization and output."""

    def __init__(self, options: Optional[ExportOptions] = None):
        """Initialize CSV service.

        Args:
            options: Export options (defaults to ExportOptions())
        """
        self.options = options or ExportOptions()

    def build_row(self, record: TaskRecord) -> list:
        """Build one CSV row: schema values, then padded subtask column pairs.

        Args:
            record: Task record

        Returns:
            List of exactly len(fields) + 2 * subtask_cap values
        """
        values = record.to_row()
        row = [values.get(field) for field in self.options.fields]

        subtasks = record.subtasks[:self.options.subtask_cap]
        for subtask in subtasks:
            row.extend([subtask.summary, subtask.status])

        row.extend([""] * (2 * (self.options.subtask_cap - len(subtasks))))
        return row

    def to_dataframe(self, records: Sequence[TaskRecord]) -> pd.DataFrame:
        """Create DataFrame from task records with the full Pivotal header."""
        rows = [self.build_row(record) for record in records]
        return pd.DataFrame(rows, columns=self.options.header, dtype=object)

    def serialize(self, records: Sequence[TaskRecord]) -> str:
        """Serialize task records to Pivotal CSV text.

        Args:
            records: Task records in output order

        Returns:
            CSV text, header first, lines joined by newline, no trailing newline
        """
        return self._to_csv(self.to_dataframe(records))

    def aggregate(self, documents: Sequence[Tuple[str, str]]) -> str:
        """Combine per-project CSV documents under a single header.

        Rows keep project order and their order within each project.
        Nothing is de-duplicated.

        Args:
            documents: (project name, CSV text) pairs produced by serialize()

        Returns:
            Combined CSV text
        """
        header = self.options.header
        frames = []
        for name, csv_text in documents:
            frame = self._read_rows(csv_text)
            if frame.empty:
                continue
            if len(frame.columns) != len(header):
                raise ValueError(
                    f"Project '{name}' has {len(frame.columns)} columns, expected {len(header)}"
                )
            frames.append(frame)

        if frames:
            combined = pd.concat(frames, ignore_index=True)
            combined.columns = header
        else:
            combined = pd.DataFrame(columns=header, dtype=object)

        return self._to_csv(combined)

    def write_project(self, name: str, csv_text: str, output_dir: str) -> bool:
        """Write a project's CSV document to <output_dir>/<name>.csv.

        Args:
            name: Project title
            csv_text: CSV document
            output_dir: Output directory

        Returns:
            True if successful, False otherwise
        """
        output_path = Path(output_dir) / f"{name}.csv"
        console.print(f"  [dim]Write[/dim] [cyan]{output_path}[/cyan]")
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(csv_text, encoding="utf-8")
            return True
        except OSError as e:
            console.print(f"[red]Error writing {output_path}:[/red] {str(e)}")
            return False

    def write_all_projects(self, documents: Sequence[Tuple[str, str]], output_dir: str) -> bool:
        """Write the combined document of all projects to 'All Projects.csv'.

        Args:
            documents: (project name, CSV text) pairs
            output_dir: Output directory

        Returns:
            True if successful, False otherwise
        """
        return self.write_project(ALL_PROJECTS_NAME, self.aggregate(documents), output_dir)

    @staticmethod
    def _to_csv(df: pd.DataFrame) -> str:
        # A \r\n terminator makes the writer quote every cell holding \r or \n
        text = df.to_csv(index=False, lineterminator="\r\n")
        text = _RECORD_END.sub(lambda m: m.group(1) or "\n", text)
        return text[:-1] if text.endswith("\n") else text

    @staticmethod
    def _read_rows(csv_text: str) -> pd.DataFrame:
        """Read a document's data rows as strings, dropping its header."""
        try:
            return pd.read_csv(
                io.StringIO(csv_text),
                header=None,
                skiprows=1,
                dtype=str,
                keep_default_na=False,
                na_filter=False
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(dtype=object)

