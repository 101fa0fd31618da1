"""SQLAlchemy-backed analysis store."""

import logging
from typing import List, Optional

from sqlalchemy import select

from ..interfaces.store import IAnalysisStore, StoredAnalysis
from ..serialization import AnalysisSerializer
from .database import DatabaseManager
from .models import AnalysisRecordModel


logger = logging.getLogger(__name__)


class SqlAnalysisStore(IAnalysisStore):
    """
    Analysis store persisting records through SQLAlchemy.

    The full analysis is kept as a JSON payload; score, grade and
    document type are duplicated into columns for querying.
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None, create_tables: bool = True):
        """
        Args:
            db_manager: Database manager (built from env vars if None).
            create_tables: Create the schema on construction.
        """
        self._db_manager = db_manager or DatabaseManager()
        if create_tables:
            self._db_manager.ensure_schema()

    def save(self, record: StoredAnalysis) -> None:
        analysis = record.analysis
        payload = AnalysisSerializer.to_dict(analysis)

        with self._db_manager.transaction() as session:
            row = session.get(AnalysisRecordModel, analysis.document_id)
            if row is None:
                row = AnalysisRecordModel(document_id=analysis.document_id)
                session.add(row)
            row.deal_id = record.deal_id
            row.filename = analysis.filename
            row.document_type = analysis.document_type.value
            row.overall_score = analysis.risk_score.overall
            row.grade = analysis.risk_score.grade.value
            row.source_text = record.source_text
            row.payload = payload

        logger.debug(f"Saved analysis {analysis.document_id}")

    def get(self, document_id: str) -> Optional[StoredAnalysis]:
        with self._db_manager.transaction() as session:
            row = session.get(AnalysisRecordModel, document_id)
            if row is None:
                return None
            return self._to_record(row)

    def delete(self, document_id: str) -> bool:
        with self._db_manager.transaction() as session:
            row = session.get(AnalysisRecordModel, document_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def list_for_deal(self, deal_id: str) -> List[StoredAnalysis]:
        query = (
            select(AnalysisRecordModel)
            .where(AnalysisRecordModel.deal_id == deal_id)
            .order_by(AnalysisRecordModel.created_at, AnalysisRecordModel.document_id)
        )
        with self._db_manager.transaction() as session:
            rows = session.execute(query).scalars().all()
            return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: AnalysisRecordModel) -> StoredAnalysis:
        return StoredAnalysis(
            analysis=AnalysisSerializer.from_dict(row.payload),
            source_text=row.source_text or "",
            deal_id=row.deal_id,
        )

    def close(self) -> None:
        """Release database connections."""
        self._db_manager.dispose()
