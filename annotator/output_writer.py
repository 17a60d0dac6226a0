"""Output writer for annotated records."""

import json
from pathlib import Path
from typing import List, Literal, Union

import pandas as pd


class OutputWriter:
    """
    Writes annotated records as JSON or as a flat per-sentence CSV.

    Can be used as a context manager; buffered records are written on exit.
    """

    def __init__(
        self,
        output_path: Union[str, Path],
        format: Literal["json", "csv"] = "json",
    ):
        """
        Initialize the output writer.

        Args:
            output_path: Path to write output file.
            format: Output format (json or csv).
        """
        self.output_path = Path(output_path)
        self.format = format
        self._buffer: List[dict] = []

        # Ensure output directory exists
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def write_record(self, record: dict) -> None:
        """Buffer one processed record."""
        self._buffer.append(record)

    @staticmethod
    def sentence_rows(record: dict) -> List[dict]:
        """Flatten a processed record into one row per sentence."""
        rows = []
        quizzes = record.get("quizzes", [])
        for order, sentence in enumerate(record.get("sentences", [])):
            quiz = quizzes[order] if order < len(quizzes) else {}
            rows.append({
                "record_id": record.get("id"),
                "sentence_order": order,
                "text": sentence["text"],
                "start": sentence["start"],
                "end": sentence["end"],
                "tags": " ".join(sentence["tags"]),
                "pattern": sentence.get("pattern"),
                "num_spans": len(sentence["spans"]),
                "quiz_type": quiz.get("type"),
                "quiz_answer": quiz.get("answer"),
            })
        return rows

    def flush(self) -> None:
        """Write buffered records to file."""
        if not self._buffer:
            return

        if self.format == "csv":
            rows = [row for record in self._buffer for row in self.sentence_rows(record)]
            pd.DataFrame(rows).to_csv(self.output_path, index=False)
        elif self.format == "json":
            with open(self.output_path, "w", encoding="utf-8") as f:
                json.dump(self._buffer, f, ensure_ascii=False, indent=2)
        else:
            raise ValueError(f"Unknown output format: {self.format}")

    def __enter__(self) -> "OutputWriter":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - flush on close."""
        self.flush()

    @property
    def count(self) -> int:
        """Return the number of records in the buffer."""
        return len(self._buffer)
