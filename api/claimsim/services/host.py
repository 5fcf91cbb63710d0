import asyncio
import logging
import threading
import uuid
from concurrent.futures import BrokenExecutor, Executor, ProcessPoolExecutor, ThreadPoolExecutor
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional, Tuple

from claimsim.config import HostConfig
from claimsim.core.simulate import check_iterations
from claimsim.models.schemas import SimulationRequest, SimulationSnapshot, SimulationSummary
from claimsim.worker import run_request

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, SimulationSummary], None]
ExecutorFactory = Callable[[], Optional[Executor]]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_executor_factory(config: HostConfig) -> Optional[Executor]:
    if config.executor == "inline":
        return None
    if config.executor == "thread":
        return ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="claimsim")
    return ProcessPoolExecutor(max_workers=config.max_workers)


def _consume_exception(fut: asyncio.Future) -> None:
    # Failures are logged on delivery; callers that never await shouldn't trigger
    # "exception was never retrieved" noise.
    if not fut.cancelled():
        fut.exception()


class SimulationHost:
    """
    Runs simulations off the caller's event loop.

    Each submit supersedes the previous one: its future is cancelled and any
    late result is dropped, so `latest` only ever reflects the newest run.
    Without an executor (or once it breaks) runs are scheduled on the loop
    with call_soon, after the submitting call returns.
    """

    def __init__(
        self,
        executor_factory: Optional[ExecutorFactory] = None,
        on_result: Optional[ResultCallback] = None,
        config: Optional[HostConfig] = None,
    ):
        self._config = config or HostConfig()
        self._on_result = on_result
        self._lock = threading.Lock()
        self._latest: Optional[SimulationSnapshot] = None
        self._pending: Optional[Tuple[str, asyncio.Future]] = None
        self._closed = False

        factory = executor_factory or partial(default_executor_factory, self._config)
        try:
            self._executor: Optional[Executor] = factory()
        except (OSError, ImportError, NotImplementedError, RuntimeError) as e:
            logger.warning("Execution context unavailable (%s); running simulations inline", e)
            self._executor = None
        else:
            if self._executor is None:
                logger.info("SimulationHost running inline")
            else:
                logger.info("SimulationHost started with %s", type(self._executor).__name__)

    @property
    def latest(self) -> Optional[SimulationSnapshot]:
        with self._lock:
            return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def inline(self) -> bool:
        return self._executor is None

    def submit(self, request: SimulationRequest) -> "asyncio.Future[SimulationSummary]":
        """
        Queue a run and return a future for its summary.

        Must be called from a running event loop. Raises InvalidIterationCount
        synchronously; the returned future is cancelled if a newer request or
        close() supersedes it before delivery.
        """
        if self._closed:
            raise RuntimeError("SimulationHost is closed")
        check_iterations(request.iterations)

        loop = asyncio.get_running_loop()
        run_id = uuid.uuid4().hex
        payload = request.model_copy(deep=True)

        future = loop.create_future()
        future.add_done_callback(_consume_exception)
        self._supersede(run_id, future, payload.iterations)

        if self._executor is not None:
            try:
                work = loop.run_in_executor(self._executor, run_request, payload)
            except BrokenExecutor as e:
                logger.warning("Executor broken (%s); falling back to inline runs", e)
                self._drop_executor()
            else:
                logger.debug("Dispatched run %s (%d iterations)", run_id, payload.iterations)
                work.add_done_callback(partial(self._on_work_done, run_id, future))
                return future

        loop.call_soon(self._run_inline, run_id, future, payload)
        return future

    def close(self) -> None:
        """Cancel pending delivery and release the executor. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        with self._lock:
            pending = self._pending
            self._pending = None
        if pending is not None and not pending[1].done():
            pending[1].cancel()

        self._drop_executor()
        logger.info("SimulationHost closed")

    def __enter__(self) -> "SimulationHost":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _supersede(self, run_id: str, future: asyncio.Future, iterations: int) -> None:
        with self._lock:
            previous = self._pending
            self._pending = (run_id, future)
            self._latest = SimulationSnapshot(
                run_id=run_id,
                status="queued",
                submitted_at=_utc_now_iso(),
                iterations=iterations,
            )
        if previous is not None and not previous[1].done():
            logger.debug("Run %s superseded by %s", previous[0], run_id)
            previous[1].cancel()

    def _drop_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _on_work_done(self, run_id: str, future: asyncio.Future, work: asyncio.Future) -> None:
        if work.cancelled():
            return
        error = work.exception()
        if error is not None:
            self._deliver(run_id, future, error=error)
        else:
            self._deliver(run_id, future, summary=work.result())

    def _run_inline(self, run_id: str, future: asyncio.Future, payload: SimulationRequest) -> None:
        if self._closed or future.done():
            return
        try:
            summary = run_request(payload)
        except Exception as e:
            self._deliver(run_id, future, error=e)
            return
        self._deliver(run_id, future, summary=summary)

    def _deliver(
        self,
        run_id: str,
        future: asyncio.Future,
        summary: Optional[SimulationSummary] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if self._closed or future.done():
            logger.debug("Discarding stale result for run %s", run_id)
            return

        with self._lock:
            current = self._pending is not None and self._pending[0] == run_id
            if current:
                self._pending = None
                self._latest = self._latest.model_copy(update={
                    "status": "failed" if error is not None else "done",
                    "finished_at": _utc_now_iso(),
                    "summary": summary,
                    "error": str(error) if error is not None else None,
                })
        if not current:
            logger.debug("Discarding stale result for run %s", run_id)
            return

        if error is not None:
            logger.error("Simulation run %s failed: %s", run_id, error, exc_info=error)
            future.set_exception(error)
            return

        logger.debug("Delivered run %s", run_id)
        future.set_result(summary)
        if self._on_result is not None:
            try:
                self._on_result(run_id, summary)
            except Exception:
                logger.exception("on_result callback failed for run %s", run_id)
