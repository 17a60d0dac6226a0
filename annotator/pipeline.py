"""Batch pipeline: annotate JSONL records and write JSON or CSV output."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Iterator, Optional

from tqdm import tqdm

from .annotate import Annotator, classify_pattern
from .checker import chunk_text, collect_chunk_matches, ingest_matches, issue_group, issues_to_matches
from .compose import compose_sentence
from .config import Config
from .merger import merge_matches
from .models import CheckerMatch
from .output_writer import OutputWriter
from .quiz import QuizBuilder
from .rules import RuleRegistry
from .vocab import normalize_vocab

logger = logging.getLogger(__name__)


class AnnotationPipeline:
    """
    Annotate a batch of texts.

    Each input record is a JSON object with a "text" field and optional
    "id", "vocabulary" and checker output ("matches", "chunk_matches" or
    "issues").
    """

    def __init__(self, config: Config, registry: Optional[RuleRegistry] = None):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline configuration.
            registry: Rule table (defaults to the built-in table).
        """
        self.config = config
        self.annotator = Annotator.from_config(config, registry=registry)
        self.quiz_builder = QuizBuilder.from_config(config)

    def process_record(self, record: dict) -> dict:
        """
        Annotate a single record.

        Args:
            record: Input record.

        Returns:
            Output record with sentences, pieces, quizzes, checker matches
            and learning goals. All offsets refer to the record text as given.
        """
        text = record.get("text") or record.get("content") or ""
        vocab = normalize_vocab(record.get("vocabulary") or [])
        matches = self.collect_matches(record, text)

        sentences = self.annotator.annotate(text)
        quizzes = self.quiz_builder.build(sentences)
        goals = self.annotator.registry.learning_goals(text, top_n=self.config.output.top_goals)

        sentence_rows = []
        for anno in sentences:
            row = anno.to_dict()
            row["pattern"] = classify_pattern(anno)
            row["pieces"] = [
                p.to_dict()
                for p in compose_sentence(
                    anno,
                    vocab,
                    grammar_only=self.config.filters.grammar_only,
                    matches=matches,
                )
            ]
            sentence_rows.append(row)

        match_rows = []
        for m in matches:
            row = m.to_dict()
            row["group"] = issue_group(m.category)
            match_rows.append(row)

        return {
            "id": record.get("id"),
            "text": text,
            "sentences": sentence_rows,
            "quizzes": [q.to_dict() for q in quizzes],
            "matches": match_rows,
            "goals": [asdict(g) for g in goals],
            "vocabulary": [v.to_dict() for v in vocab],
        }

    def collect_matches(self, record: dict, text: str) -> list[CheckerMatch]:
        """
        Gather checker output for a record into one merged list.

        Three shapes are accepted: "matches" with offsets over the whole
        text, "chunk_matches" with one list per chunk of chunk_text (offsets
        relative to the chunk), and language-model "issues".

        Args:
            record: Input record.
            text: Record text the checker offsets refer to.

        Returns:
            Merged, indexed matches.
        """
        matches = ingest_matches(record.get("matches") or [], text_length=len(text))

        chunk_results = record.get("chunk_matches")
        if chunk_results:
            chunks = chunk_text(text, self.config.checker.max_chars_per_chunk)
            if len(chunk_results) != len(chunks):
                logger.warning(
                    f"Record {record.get('id')}: {len(chunk_results)} chunk results "
                    f"for {len(chunks)} chunks"
                )
            matches.extend(collect_chunk_matches(zip(chunks, chunk_results)))

        issues = record.get("issues")
        if issues:
            matches.extend(issues_to_matches(issues, len(text)))

        return merge_matches(matches)

    def _read_input(self, input_path: Path) -> Iterator[dict]:
        """Yield records from a JSONL file, skipping malformed lines."""
        with open(input_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed JSON on line {line_num}")
                    continue
                if not isinstance(record, dict):
                    logger.warning(f"Skipping non-object record on line {line_num}")
                    continue
                yield record

    def run(self) -> int:
        """
        Execute the pipeline.

        Returns:
            Number of records processed.
        """
        input_path = self.config.input_file
        if input_path is None:
            raise ValueError("input_file is not set")
        if not Path(input_path).exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")

        output_path = self.config.output.output_path
        logger.info("Starting annotation pipeline")
        logger.info(f"Input: {input_path}")
        logger.info(f"Output: {output_path}")
        logger.info(f"Active rules: {len(self.annotator.registry)}")

        processed = 0
        with OutputWriter(output_path, format=self.config.output.format) as writer:
            for record in tqdm(self._read_input(input_path), desc="Annotating"):
                writer.write_record(self.process_record(record))
                processed += 1

        logger.info(f"Pipeline complete. Processed {processed} records")
        return processed
