from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Union

from catan_randomizer.domain.board import CatanBoard
from catan_randomizer.domain.hexes import Hex
from catan_randomizer.shuffle.engine import ShufflingError, shuffle
from catan_randomizer.shuffle.types import BinaryConstraints, ShuffleConfig

logger = logging.getLogger(__name__)

RESULT = "result"
ERROR = "error"


@dataclass(frozen=True)
class ShuffleRequest:
    board: CatanBoard
    constraints: BinaryConstraints = field(default_factory=BinaryConstraints)
    seed: Optional[int] = None
    config: ShuffleConfig = field(default_factory=ShuffleConfig)


@dataclass(frozen=True)
class ShuffleResult:
    request_id: int
    layout: List[Hex]
    elapsed_s: float = 0.0
    kind: str = RESULT


@dataclass(frozen=True)
class ShuffleFailure:
    request_id: int
    message: str
    kind: str = ERROR


ShuffleMessage = Union[ShuffleResult, ShuffleFailure]


def run_shuffle_request(request: ShuffleRequest, request_id: int = 0) -> ShuffleMessage:
    """Turn one request into its terminal message.

    Only shuffling failures become error messages; anything else is a bug in
    the board or the caller and propagates.
    """
    started = time.perf_counter()
    try:
        layout = shuffle(
            request.board,
            request.constraints,
            seed=request.seed,
            config=request.config,
        )
    except ShufflingError as exc:
        logger.info("Shuffle request %d failed: %s", request_id, exc)
        return ShuffleFailure(request_id=request_id, message=str(exc))
    return ShuffleResult(request_id=request_id, layout=layout, elapsed_s=time.perf_counter() - started)


class ShuffleWorker:
    """Runs shuffle requests on a background thread so callers never block on retries.

    Each submitted request produces exactly one message. Submitting again
    supersedes the previous request; its message is dropped when it arrives.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[tuple[str, int, object]] = queue.Queue()
        self._request_id = 0
        self._thread: threading.Thread | None = None
        self._pending = False

    @property
    def busy(self) -> bool:
        return self._pending

    @property
    def request_id(self) -> int:
        return self._request_id

    def submit(
        self,
        board: CatanBoard,
        constraints: Optional[BinaryConstraints] = None,
        *,
        seed: Optional[int] = None,
        config: Optional[ShuffleConfig] = None,
    ) -> int:
        self._request_id += 1
        request = ShuffleRequest(
            board=board,
            constraints=constraints if constraints is not None else BinaryConstraints(),
            seed=seed,
            config=config if config is not None else ShuffleConfig(),
        )
        self._pending = True
        self._thread = threading.Thread(
            target=self._run,
            args=(self._request_id, request),
            name=f"shuffle-{self._request_id}",
            daemon=True,
        )
        self._thread.start()
        return self._request_id

    def _run(self, request_id: int, request: ShuffleRequest) -> None:
        try:
            message = run_shuffle_request(request, request_id)
        except Exception as exc:  # handed to the caller's thread by poll()/wait()
            self._queue.put(("crash", request_id, exc))
            return
        self._queue.put(("message", request_id, message))

    def poll(self) -> Optional[ShuffleMessage]:
        """Return the current request's message if it has arrived, without blocking."""
        while True:
            try:
                status, request_id, payload = self._queue.get_nowait()
            except queue.Empty:
                return None
            message = self._accept(status, request_id, payload)
            if message is not None:
                return message

    def wait(self, timeout: Optional[float] = None) -> ShuffleMessage:
        """Block until the current request's message arrives."""
        if not self._pending:
            raise RuntimeError("No shuffle request is pending.")
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                status, request_id, payload = self._queue.get(timeout=remaining)
            except queue.Empty:
                raise TimeoutError(f"Shuffle request {self._request_id} did not finish in time.") from None
            message = self._accept(status, request_id, payload)
            if message is not None:
                return message

    def _accept(self, status: str, request_id: int, payload: object) -> Optional[ShuffleMessage]:
        if request_id != self._request_id:
            logger.debug("Dropping message for superseded request %d.", request_id)
            return None
        self._pending = False
        if status == "crash":
            assert isinstance(payload, BaseException)
            raise payload
        assert isinstance(payload, (ShuffleResult, ShuffleFailure))
        return payload
