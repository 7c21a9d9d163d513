"""
Concurrent report table assembly for seqinfo.

Every (entity, applicable field) pair becomes a Job. Jobs run on a fixed
thread pool; each worker evaluates one field and writes one cell under the
table lock. ``TableAssembler.assemble`` returns only after every job has
finished, so the table handed to an output adapter is always complete.
"""

from __future__ import annotations

import concurrent.futures as futures
import multiprocessing
import threading
from collections.abc import Iterator, Sequence
from enum import Enum

from ..core.constants import MAX_WORKER_CAP, WORKERS_PER_CPU
from ..core.types import Entity, Job
from ..errors import ConfigError, FieldError
from ..output.logger import SimpleLogger
from .fields import FieldEvaluator


class Table:
    """Grid of string cells; row 0 holds the column labels."""

    def __init__(self, labels: Sequence[str], data_rows: int) -> None:
        self.labels = list(labels)
        self.cells: list[list[str]] = [list(self.labels)]
        self.cells.extend([""] * len(self.labels) for _ in range(data_rows))
        self._lock = threading.Lock()

    @property
    def num_rows(self) -> int:
        return len(self.cells)

    @property
    def num_columns(self) -> int:
        return len(self.labels)

    def set(self, row: int, column: int, value: str) -> None:
        with self._lock:
            self.cells[row][column] = value

    def __iter__(self) -> Iterator[list[str]]:
        return iter(self.cells)


class AssemblerState(str, Enum):
    """Lifecycle of one assembly run."""

    PENDING = "pending"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    COMPLETE = "complete"


def pick_worker_count(requested: int | None = None, sequential: bool = False) -> int:
    """Determine worker count within the cap."""
    if sequential:
        return 1
    if requested is None:
        cores = max(1, multiprocessing.cpu_count())
        return min(cores * WORKERS_PER_CPU, MAX_WORKER_CAP)
    return max(1, min(requested, MAX_WORKER_CAP))


def build_jobs(entities: Sequence[Entity], labels: Sequence[str], evaluator: FieldEvaluator) -> list[Job]:
    """Create one job per entity and configured field of its kind.

    Args:
        entities: Report rows in output order.
        labels: Column labels; a field's column is the position of its name.
        evaluator: Supplies the field names configured per entity kind.

    Returns:
        list[Job]: Jobs in row-major order.

    Raises:
        ConfigError: If a configured field has no column.
    """
    columns = {name: idx for idx, name in enumerate(labels)}
    jobs: list[Job] = []
    for i, entity in enumerate(entities, 1):
        for name in evaluator.field_names(entity.kind):
            if name not in columns:
                raise ConfigError(f"{entity.kind.value} field '{name}' is not listed in fields")
            jobs.append(Job(row=i, column=columns[name], field_name=name, entity=entity))
    return jobs


class TableAssembler:
    """Evaluate all cells of a report on a thread pool."""

    def __init__(
        self,
        labels: Sequence[str],
        evaluator: FieldEvaluator,
        *,
        workers: int | None = None,
        verbose: bool = False,
        logger: SimpleLogger | None = None,
    ) -> None:
        self.labels = list(labels)
        self.evaluator = evaluator
        self.workers = workers or pick_worker_count()
        self.verbose = verbose
        self.logger = logger
        self.state = AssemblerState.PENDING

    def assemble(self, entities: Sequence[Entity]) -> Table:
        """Fill a table with one row per entity.

        Field failures leave their cell empty (logged when verbose). Any other
        exception raised by a worker is re-raised once all jobs have finished.

        Args:
            entities: Sequences then movies, in discovery order.

        Returns:
            Table: ``len(entities) + 1`` rows by ``len(labels)`` columns.
        """
        self.state = AssemblerState.PENDING
        table = Table(self.labels, len(entities))
        jobs = build_jobs(entities, self.labels, self.evaluator)

        with futures.ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="seqinfo-field") as pool:
            self.state = AssemblerState.DISPATCHING
            futs = [pool.submit(self._run_job, table, job) for job in jobs]
            self.state = AssemblerState.DRAINING
            done, _ = futures.wait(futs)

        for fut in done:
            fut.result()
        self.state = AssemblerState.COMPLETE
        return table

    def _run_job(self, table: Table, job: Job) -> None:
        try:
            value = self.evaluator.evaluate(job.field_name, job.entity)
        except FieldError as e:
            if self.verbose and self.logger:
                self.logger.warning(f"failed to execute: {e}")
            return
        table.set(job.row, job.column, value)
