# beer_me_up/services/checkin_stream.py
"""
Firestore 실시간 리스너(on_snapshot)를 CheckIn 이터레이터로 감싸는 모듈
"""

import logging
import queue
import threading
from typing import Callable

from google.cloud.firestore_v1.watch import ChangeType

from beer_me_up.models.checkin import CheckIn

logger = logging.getLogger(__name__)

_CLOSED = object()


class CheckinStream:
    """
    'history' 컬렉션에 새로 추가된(ADDED) 체크인만 내보내는 이터레이터.

    - on_snapshot 콜백은 Firestore 클라이언트의 백그라운드 스레드에서 실행되며,
      파싱된 CheckIn을 내부 큐에 넣기만 합니다.
    - close()는 리스너를 즉시 해제하며 여러 번 호출해도 안전합니다.
      close() 이후에는 어떤 항목도 내보내지 않습니다.
    - 리스너가 비정상 종료되거나 문서를 파싱할 수 없으면 예외 없이 이터레이션을 끝냅니다.
    """

    def __init__(self, query, parse: Callable[..., CheckIn], poll_interval: float = 1.0):
        self._parse = parse
        self._poll_interval = poll_interval
        self._queue = queue.Queue()
        self._closed = threading.Event()
        self._lock = threading.Lock()
        self._watch = query.on_snapshot(self._on_snapshot)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _on_snapshot(self, docs, changes, read_time):
        if self._closed.is_set():
            return
        try:
            for change in changes:
                if change.type != ChangeType.ADDED:
                    continue
                self._queue.put(self._parse(change.document))
        except Exception as e:
            logger.error(f"체크인 리스너 처리 실패, 스트림을 종료합니다: {e}", exc_info=True)
            self._queue.put(_CLOSED)

    def _is_watch_active(self) -> bool:
        return self._watch is not None and getattr(self._watch, 'is_active', True)

    def __iter__(self):
        return self

    def __next__(self) -> CheckIn:
        while True:
            if self._closed.is_set():
                raise StopIteration

            try:
                item = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                if not self._is_watch_active():
                    logger.warning("Firestore 리스너가 중단되어 체크인 스트림을 종료합니다.")
                    self.close()
                    raise StopIteration
                continue

            if item is _CLOSED or self._closed.is_set():
                self.close()
                raise StopIteration
            return item

    def close(self):
        """리스너를 해제합니다. 이미 닫힌 경우 아무 일도 하지 않습니다."""
        with self._lock:
            if self._closed.is_set():
                return
            self._closed.set()
            watch = self._watch
            self._watch = None

        if watch is not None:
            try:
                watch.unsubscribe()
            except Exception as e:
                logger.warning(f"Firestore 리스너 해제 중 오류 (무시됨): {e}")
        # get()에서 대기 중인 소비자를 깨웁니다.
        self._queue.put(_CLOSED)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
