"""Storage backends for the content store.

Both backends expose the same keyed-document interface. Documents are plain
JSON-compatible dicts; the repository (``ContentStore``) owns validation,
sorting and filtering.

- ``MemoryBackend``: process-lifetime dicts, reset on restart (default).
- ``SqlAlchemyBackend``: one ``content_records`` table via SQLAlchemy.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine

from app.database import Base, build_session_factory
from app.models import ContentRecord

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """collection/key 단위로 JSON 문서를 저장하는 저장소 인터페이스"""

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[dict]:
        ...

    @abstractmethod
    def put(self, collection: str, key: str, payload: dict) -> None:
        ...

    @abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        ...

    @abstractmethod
    def values(self, collection: str) -> List[dict]:
        ...

    @abstractmethod
    def keys(self, collection: str) -> List[str]:
        ...

    def count(self, collection: str) -> int:
        return len(self.keys(collection))


class MemoryBackend(StorageBackend):
    """메모리 저장소. 저장/조회 시 깊은 복사를 해서 호출자가 내부 상태를 바꿀 수 없습니다."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}

    def _bucket(self, collection: str) -> Dict[str, dict]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, key: str) -> Optional[dict]:
        payload = self._bucket(collection).get(key)
        return copy.deepcopy(payload) if payload is not None else None

    def put(self, collection: str, key: str, payload: dict) -> None:
        self._bucket(collection)[key] = copy.deepcopy(payload)

    def delete(self, collection: str, key: str) -> bool:
        return self._bucket(collection).pop(key, None) is not None

    def values(self, collection: str) -> List[dict]:
        return [copy.deepcopy(payload) for payload in self._bucket(collection).values()]

    def keys(self, collection: str) -> List[str]:
        return list(self._bucket(collection).keys())


class SqlAlchemyBackend(StorageBackend):
    """SQLAlchemy 저장소. 호출마다 세션을 열고 닫습니다."""

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self.session_factory = build_session_factory(engine)
        if create_tables:
            Base.metadata.create_all(bind=engine)
            logger.info("content_records 테이블 확인/생성 완료")

    def get(self, collection: str, key: str) -> Optional[dict]:
        with self.session_factory() as session:
            record = session.get(ContentRecord, (collection, key))
            return dict(record.payload) if record is not None else None

    def put(self, collection: str, key: str, payload: dict) -> None:
        with self.session_factory() as session:
            record = session.get(ContentRecord, (collection, key))
            if record is None:
                session.add(ContentRecord(collection=collection, key=key, payload=payload))
            else:
                record.payload = payload
            session.commit()

    def delete(self, collection: str, key: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(
                delete(ContentRecord).where(
                    ContentRecord.collection == collection,
                    ContentRecord.key == key,
                )
            )
            session.commit()
            return result.rowcount > 0

    def values(self, collection: str) -> List[dict]:
        with self.session_factory() as session:
            stmt = select(ContentRecord.payload).where(ContentRecord.collection == collection)
            return [dict(payload) for payload in session.execute(stmt).scalars().all()]

    def keys(self, collection: str) -> List[str]:
        with self.session_factory() as session:
            stmt = select(ContentRecord.key).where(ContentRecord.collection == collection)
            return list(session.execute(stmt).scalars().all())

    def count(self, collection: str) -> int:
        with self.session_factory() as session:
            stmt = select(func.count()).select_from(ContentRecord).where(ContentRecord.collection == collection)
            return int(session.execute(stmt).scalar_one())
