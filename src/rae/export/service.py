from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import duckdb

from rae.assignment import incoming_counts
from rae.contracts import Character
from rae.core import make_id


class AssignmentExportService:
    """Audit export of assignment runs through a DuckDB analytics file."""

    def __init__(self, analytics_db: Path) -> None:
        self.analytics_db = analytics_db
        self.analytics_db.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.analytics_db))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS run_edges (
                    run_id VARCHAR,
                    algorithm VARCHAR,
                    position INTEGER,
                    source_id VARCHAR,
                    target_id VARCHAR,
                    march_type VARCHAR,
                    score_value DOUBLE
                );

                CREATE TABLE IF NOT EXISTS run_characters (
                    run_id VARCHAR,
                    algorithm VARCHAR,
                    character_id VARCHAR,
                    name VARCHAR,
                    status VARCHAR,
                    is_farm BOOLEAN,
                    marches_count INTEGER,
                    outgoing INTEGER,
                    incoming INTEGER,
                    score DOUBLE
                );
                """
            )

    def record_run(self, algorithm: str, result: Sequence[Character], run_id: str | None = None) -> str:
        run_id = run_id or make_id("run")
        counts = incoming_counts(result)
        edge_rows = [
            (run_id, algorithm, position, c.character_id, e.target_id, e.march_type, e.score_value)
            for c in result
            for position, e in enumerate(c.reinforce)
        ]
        character_rows = [
            (
                run_id,
                algorithm,
                c.character_id,
                c.name,
                c.status,
                c.is_farm,
                c.marches_count,
                len(c.reinforce),
                counts[c.character_id],
                c.score,
            )
            for c in result
        ]
        self.initialize_schema()
        with self.connect() as conn:
            if edge_rows:
                conn.executemany("INSERT INTO run_edges VALUES (?, ?, ?, ?, ?, ?, ?)", edge_rows)
            if character_rows:
                conn.executemany("INSERT INTO run_characters VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", character_rows)
        return run_id

    def export_runs(self, output_dir: Path) -> list[Path]:
        output_dir.mkdir(parents=True, exist_ok=True)
        self.initialize_schema()
        outputs: list[Path] = []
        with self.connect() as conn:
            outputs.extend(self._export_table(conn, "run_edges", output_dir / "run_edges"))
            outputs.extend(self._export_table(conn, "run_characters", output_dir / "run_characters"))
        return outputs

    def _export_table(self, conn: Any, table: str, stem: Path) -> list[Path]:
        csv_path = stem.with_suffix(".csv")
        parquet_path = stem.with_suffix(".parquet")
        conn.execute(f"COPY (SELECT * FROM {table}) TO '{csv_path.as_posix()}' (HEADER, DELIMITER ',')")
        conn.execute(f"COPY (SELECT * FROM {table}) TO '{parquet_path.as_posix()}' (FORMAT PARQUET)")
        return [csv_path, parquet_path]
