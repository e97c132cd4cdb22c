"""
Identifier enumeration - batch and streaming production of the identifier space

Every run walks the same nested order: machine index outermost, then process
index, then counter innermost (the counter varies fastest). Consumers that need
identifiers sorted by counter-within-process-within-machine rely on this order.

Two modes:
- generate(): materializes the whole space in one list
- stream(): a producer thread hands identifiers to the reader through a
  bounded queue; END_OF_STREAM is always enqueued once when the producer stops

Validation always runs before the first identifier is built.
"""

import contextvars
import queue
import threading
from collections.abc import Iterator
from typing import Any

from bson import ObjectId

from oid_space.generator.encoding import encode
from oid_space.generator.models import GenerationConfig
from oid_space.kernel.errors import GenerationTooLarge, ValidationError
from oid_space.kernel.logging import (
    LogOperation,
    current_run_id,
    generate_run_id,
    generation_run,
    get_logger,
)
from oid_space.kernel.metrics import (
    identifiers_generated_total,
    record_validation_failure,
    track_generation,
)

logger = get_logger(__name__)

# Seconds a cancellable producer waits on a full queue before re-checking its token
CANCEL_POLL_INTERVAL = 0.05


class _EndOfStream:
    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM: Any = _EndOfStream()


def _check(config: GenerationConfig) -> None:
    try:
        config.validate_bounds()
    except ValidationError as e:
        record_validation_failure(type(e).__name__)
        raise


def _enumerate(config: GenerationConfig) -> Iterator[ObjectId]:
    seconds = config.unix_seconds
    for machine in range(config.machine_count):
        for process in range(config.process_count):
            for counter in range(config.item_count):
                yield encode(seconds, machine, process, counter)


@track_generation("batch")
def generate(config: GenerationConfig, *, max_count: int | None = None) -> list[ObjectId]:
    """
    Produce every identifier of the config's space in one list

    Args:
        config: Generation parameters
        max_count: Optional guard; refuse to materialize more identifiers

    Returns:
        Exactly config.count() identifiers in nested order

    Raises:
        MachineCountTooLarge, ItemCountTooLarge: config is invalid
        GenerationTooLarge: config.count() exceeds max_count
    """
    _check(config)
    total = config.count()
    if max_count is not None and total > max_count:
        raise GenerationTooLarge(total, max_count)

    with generation_run(), LogOperation(
        logger,
        "generate",
        machine_count=config.machine_count,
        process_count=config.process_count,
        item_count=config.item_count,
        count=total,
    ):
        oids = list(_enumerate(config))

    identifiers_generated_total.labels(mode="batch").inc(len(oids))
    return oids


def iter_identifiers(config: GenerationConfig) -> Iterator[ObjectId]:
    """
    Lazily yield the config's identifiers in the calling thread

    Validation happens at call time, not on the first next().
    """
    _check(config)
    return _enumerate(config)


def _put(q: queue.Queue, item: Any, cancel: threading.Event | None) -> bool:
    """Blocking put; returns False if the cancel token fires first"""
    if cancel is None:
        q.put(item)
        return True
    while not cancel.is_set():
        try:
            q.put(item, timeout=CANCEL_POLL_INTERVAL)
            return True
        except queue.Full:
            continue
    return False


@track_generation("stream")
def send_to_queue(
    config: GenerationConfig,
    q: queue.Queue,
    *,
    cancel: threading.Event | None = None,
) -> None:
    """
    Push the config's identifiers into q, then END_OF_STREAM

    The sentinel is enqueued exactly once on every exit path, including
    when validation fails, so a reader blocked on q.get() is always released.
    When cancel is set the producer stops at its next blocking put; the
    sentinel then waits for room only until the token fires and is dropped
    if the queue is still full, since nobody is reading any more.

    Raises:
        MachineCountTooLarge, ItemCountTooLarge: after END_OF_STREAM is enqueued
    """
    sent = 0
    try:
        _check(config)
        with LogOperation(logger, "stream", count=config.count()):
            for oid in _enumerate(config):
                if not _put(q, oid, cancel):
                    logger.info("stream cancelled by consumer", sent=sent)
                    return
                sent += 1
    finally:
        identifiers_generated_total.labels(mode="stream").inc(sent)
        if cancel is None:
            q.put(END_OF_STREAM)
        elif not _put(q, END_OF_STREAM, cancel):
            try:
                q.put_nowait(END_OF_STREAM)
            except queue.Full:
                pass  # consumer is gone


def drain(q: queue.Queue) -> Iterator[ObjectId]:
    """Yield items from q until END_OF_STREAM"""
    while True:
        item = q.get()
        if item is END_OF_STREAM:
            return
        yield item


class IdentifierStream:
    """
    Finite, non-restartable iterator fed by a producer thread

    Closing the stream (or leaving its with-block) cancels the producer, so
    a reader that stops early never leaves it blocked on a full queue.
    """

    def __init__(
        self,
        config: GenerationConfig,
        *,
        buffer_size: int = 1,
        cancel: threading.Event | None = None,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.config = config
        self._queue: queue.Queue = queue.Queue(maxsize=buffer_size)
        self._cancel = cancel or threading.Event()
        self._error: BaseException | None = None
        self._finished = False
        # the producer logs under the run id of the thread that opened the stream
        self.run_id = current_run_id() or generate_run_id()
        self._thread = threading.Thread(
            target=contextvars.copy_context().run,
            args=(self._produce,),
            name="oid-space-producer",
            daemon=True,
        )

    def _produce(self) -> None:
        try:
            with generation_run(self.run_id):
                send_to_queue(self.config, self._queue, cancel=self._cancel)
        except Exception as e:
            # handed to the reader after END_OF_STREAM
            self._error = e

    def start(self) -> "IdentifierStream":
        self._thread.start()
        return self

    def __iter__(self) -> "IdentifierStream":
        return self

    def __next__(self) -> ObjectId:
        if self._finished:
            raise StopIteration
        item = self._queue.get()
        if item is END_OF_STREAM:
            self._finished = True
            self._thread.join()
            if self._error is not None:
                raise self._error
            raise StopIteration
        return item

    @property
    def closed(self) -> bool:
        return self._finished

    def close(self) -> None:
        """Stop reading; the producer exits at its next put"""
        self._finished = True
        self._cancel.set()
        if self._thread.is_alive():
            self._thread.join()

    def __enter__(self) -> "IdentifierStream":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def stream(
    config: GenerationConfig,
    *,
    buffer_size: int = 1,
    cancel: threading.Event | None = None,
) -> IdentifierStream:
    """
    Start producing the config's identifiers on a background thread

    Args:
        config: Generation parameters
        buffer_size: Capacity of the hand-off queue
        cancel: Optional external cancellation token

    Returns:
        Running IdentifierStream, iterate it to consume

    Raises:
        MachineCountTooLarge, ItemCountTooLarge: before any thread starts
    """
    _check(config)
    return IdentifierStream(config, buffer_size=buffer_size, cancel=cancel).start()
