"""Emissão das linhas de log de método, síncrona ou via fila com thread de drenagem."""
from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

from aoplog.aop.strategy import LogStrategy


class _StopToken:
    """Marca de parada; cada thread de drenagem só encerra com a sua."""


class LogEmitter:
    """Escreve ``LogStrategy`` no logger injetado.

    Estratégias assíncronas entram numa fila limitada com ``put_nowait`` e são
    escritas por uma única thread de drenagem. Fila cheia ou emitter encerrado
    fazem a escrita acontecer na thread chamadora, então nenhuma linha se perde.
    ``shutdown`` drena tudo o que foi enfileirado antes de retornar.
    """

    def __init__(self, logger: logging.Logger, queue_size: int = 1000, drain_timeout: float = 5.0):
        self._logger = logger
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=queue_size)
        self._drain_timeout = drain_timeout
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop: _StopToken | None = None
        self._closed = False
        self._emitted = 0
        self._dropped_to_sync = 0

    def start(self) -> None:
        with self._lock:
            if not self._closed and self._thread is not None and self._thread.is_alive():
                self._logger.warning("log_emitter_already_started")
                return
            # Reabre um emitter encerrado. Uma thread antiga que estourou o prazo
            # continua drenando até achar o próprio token de parada.
            self._closed = False
            self._start_locked()

    def emit(self, strategy: LogStrategy) -> None:
        if not strategy.asynchronous:
            self._write(strategy)
            return
        with self._lock:
            closed = self._closed
            if not closed:
                if self._thread is None or not self._thread.is_alive():
                    self._start_locked()
                try:
                    self._queue.put_nowait(strategy)
                    return
                except queue.Full:
                    self._dropped_to_sync += 1
        if not closed:
            self._logger.warning("log_queue_full", extra={"queue_size": self._queue.maxsize})
        self._write(strategy)

    def flush(self) -> None:
        """Bloqueia até a thread de drenagem escrever tudo o que está na fila."""
        self._queue.join()

    def shutdown(self, timeout: float | None = None) -> None:
        budget = self._drain_timeout if timeout is None else timeout
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread, stop = self._thread, self._stop
        if thread is None or stop is None:
            return
        deadline = time.monotonic() + budget
        try:
            self._queue.put(stop, timeout=budget)
        except queue.Full:
            self._logger.warning("log_drain_timeout", extra={"pending": self._queue.qsize()})
            return
        thread.join(timeout=max(deadline - time.monotonic(), 0.0))
        if thread.is_alive():
            self._logger.warning("log_drain_timeout", extra={"pending": self._queue.qsize()})
            return
        with self._lock:
            if self._thread is thread:
                self._thread = None
                self._stop = None
        self._logger.debug("log_emitter_stopped", extra={"emitted": self._emitted})

    def health(self) -> dict[str, Any]:
        with self._lock:
            return {
                "running": self._thread is not None and self._thread.is_alive() and not self._closed,
                "queued": self._queue.qsize(),
                "emitted": self._emitted,
                "dropped_to_sync": self._dropped_to_sync,
            }

    def _start_locked(self) -> None:
        stop = _StopToken()
        self._thread = threading.Thread(target=self._drain, args=(stop,), daemon=True, name="aoplog-log-drain")
        self._stop = stop
        self._thread.start()

    def _drain(self, stop: _StopToken) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is stop:
                    return
                if isinstance(item, _StopToken):
                    # Token de outra thread de drenagem.
                    continue
                self._write(item)
            except Exception:
                self._logger.exception("log_drain_write_failed")
            finally:
                self._queue.task_done()

    def _write(self, strategy: LogStrategy) -> None:
        self._logger.info("method_log", extra=strategy.to_extra())
        with self._lock:
            self._emitted += 1
