"""
In-memory keyword catalog that annotates records with the engine's results
"""
import logging
from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, Iterable, List, Optional, Union

from config import config
from engine import KeywordEngine
from exceptions import KeywordNotFoundError, KeywordValidationError
from models import (
    BatchRecomputeResult, KeywordPage, KeywordRecord, KeywordStatus, PriorityTier, TierAIOStats,
    DistributionReport,
)
from utils import timed, validate_cpc, validate_keyword_text, validate_search_volume

logger = logging.getLogger(__name__)

SAMPLE_KEYWORDS = [
    {"text": "how to install eufy security camera", "search_volume": 120000, "cpc": 2.5},
    {"text": "eufy robot vacuum review", "search_volume": 85000, "cpc": 3.2},
    {"text": "eufy doorbell vs ring", "search_volume": 65000, "cpc": 2.8},
    {"text": "what is eufy smart home", "search_volume": 45000, "cpc": 1.8},
    {"text": "eufy baby monitor setup guide", "search_volume": 25000, "cpc": 2.2},
    {"text": "best eufy security system", "search_volume": 18000, "cpc": 3.5},
    {"text": "eufy camera troubleshooting", "search_volume": 12000, "cpc": 1.5},
    {"text": "eufy vacuum cleaner parts", "search_volume": 8000, "cpc": 2.0},
    {"text": "eufy home security tips", "search_volume": 4500, "cpc": 1.2},
    {"text": "eufy app not working", "search_volume": 3000, "cpc": 0.8},
]


def _coerce_status(status: Union[KeywordStatus, str, None]) -> Optional[KeywordStatus]:
    if status is None or isinstance(status, KeywordStatus):
        return status
    try:
        return KeywordStatus(str(status).upper())
    except ValueError:
        raise KeywordValidationError(f"Invalid keyword status: {status}", field="status")


def _coerce_tier(priority: Union[PriorityTier, str, None]) -> Optional[PriorityTier]:
    if priority is None or isinstance(priority, PriorityTier):
        return priority
    try:
        return PriorityTier(str(priority).upper())
    except ValueError:
        raise KeywordValidationError(f"Invalid priority level: {priority}", field="priority")


class KeywordCatalog:
    """Owns keyword records and serialises updates per record id"""

    def __init__(self, engine: Optional[KeywordEngine] = None, metrics=None):
        self.engine = engine or KeywordEngine()
        self.metrics = metrics
        self._records: Dict[str, KeywordRecord] = {}
        self._record_locks: Dict[str, Lock] = {}
        self._lock = Lock()
        self._id_counter = 1

    def _lock_for(self, keyword_id: str) -> Optional[Lock]:
        """Per-record lock, or None when the id is not in the catalog"""
        with self._lock:
            if keyword_id not in self._records:
                return None
            lock = self._record_locks.get(keyword_id)
            if lock is None:
                lock = Lock()
                self._record_locks[keyword_id] = lock
            return lock

    def _snapshot(self) -> List[KeywordRecord]:
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def create(self, text: str, search_volume: Union[int, float, None] = 0,
               cpc: Union[int, float, None] = 0.0,
               status: Union[KeywordStatus, str] = KeywordStatus.DRAFT) -> KeywordRecord:
        """Validate input and store a new annotated keyword"""
        text = validate_keyword_text(text)
        search_volume = validate_search_volume(search_volume)
        cpc = validate_cpc(cpc)
        status = _coerce_status(status) or KeywordStatus.DRAFT

        priority = self.engine.classify(search_volume)
        analysis = self.engine.score(text)
        now = datetime.now()

        with self._lock:
            keyword_id = f"keyword-{self._id_counter}"
            self._id_counter += 1
            record = KeywordRecord(
                id=keyword_id,
                text=text,
                search_volume=search_volume,
                cpc=cpc,
                priority=priority,
                priority_info=self.engine.tier_info(priority),
                aio_score=analysis.score,
                aio_analysis=analysis,
                status=status,
                created_at=now,
                updated_at=now,
            )
            self._records[keyword_id] = record

        if self.metrics:
            self.metrics.record_keyword_created()
        logger.info(f"Created {keyword_id} '{text}' as {priority.value} with AIO score {analysis.score}")
        return record

    def get(self, keyword_id: str) -> Optional[KeywordRecord]:
        with self._lock:
            return self._records.get(keyword_id)

    def update(self, keyword_id: str, text: Optional[str] = None,
               search_volume: Union[int, float, None] = None,
               cpc: Union[int, float, None] = None,
               status: Union[KeywordStatus, str, None] = None) -> KeywordRecord:
        """Apply changes, re-classifying on volume and re-scoring on text changes"""
        changes = {}
        if text is not None:
            changes["text"] = validate_keyword_text(text)
        if search_volume is not None:
            changes["search_volume"] = validate_search_volume(search_volume)
        if cpc is not None:
            changes["cpc"] = validate_cpc(cpc)
        if status is not None:
            changes["status"] = _coerce_status(status)

        lock = self._lock_for(keyword_id)
        if lock is None:
            raise KeywordNotFoundError(keyword_id)

        with lock:
            current = self.get(keyword_id)
            if current is None:
                raise KeywordNotFoundError(keyword_id)

            if "search_volume" in changes:
                priority = self.engine.classify(changes["search_volume"])
                changes["priority"] = priority
                changes["priority_info"] = self.engine.tier_info(priority)
            if "text" in changes:
                analysis = self.engine.score(changes["text"])
                changes["aio_score"] = analysis.score
                changes["aio_analysis"] = analysis

            updated = replace(current, updated_at=datetime.now(), **changes)
            with self._lock:
                self._records[keyword_id] = updated

        if self.metrics:
            self.metrics.record_keyword_updated(rescored="text" in changes)
        logger.info(f"Updated {keyword_id}: {sorted(changes)}")
        return updated

    def delete(self, keyword_id: str) -> bool:
        lock = self._lock_for(keyword_id)
        if lock is None:
            raise KeywordNotFoundError(keyword_id)

        with lock:
            with self._lock:
                if keyword_id not in self._records:
                    raise KeywordNotFoundError(keyword_id)
                del self._records[keyword_id]
                self._record_locks.pop(keyword_id, None)

        if self.metrics:
            self.metrics.record_keyword_deleted()
        logger.info(f"Deleted {keyword_id}")
        return True

    def list_keywords(self, search: Optional[str] = None,
                      priority: Union[PriorityTier, str, None] = None,
                      status: Union[KeywordStatus, str, None] = None,
                      min_aio_score: Optional[int] = None,
                      page: int = 1, limit: int = None,
                      include_analysis: bool = False) -> KeywordPage:
        """Filter, sort by search volume descending and paginate"""
        limit = config.default_page_limit if limit is None else limit
        if page < 1:
            raise KeywordValidationError("Page must be at least 1", field="page")
        if not 1 <= limit <= config.max_page_limit:
            raise KeywordValidationError(
                f"Limit must be between 1 and {config.max_page_limit}", field="limit"
            )
        if min_aio_score is not None and not 0 <= min_aio_score <= 100:
            raise KeywordValidationError("Minimum AIO score must be between 0 and 100", field="min_aio_score")

        priority = _coerce_tier(priority)
        status = _coerce_status(status)
        items = self._snapshot()

        if search:
            needle = search.lower()
            items = [k for k in items if needle in k.text.lower()]
        if priority is not None:
            items = [k for k in items if k.priority is priority]
        if status is not None:
            items = [k for k in items if k.status is status]
        if min_aio_score is not None:
            items = [k for k in items if k.aio_score >= min_aio_score]

        total = len(items)
        items.sort(key=lambda k: k.search_volume, reverse=True)
        start = (page - 1) * limit
        page_items = items[start:start + limit]

        return KeywordPage(
            items=[k.to_dict(include_analysis=include_analysis) for k in page_items],
            total=total,
            page=page,
            limit=limit,
        )

    def distribution(self) -> DistributionReport:
        return self.engine.aggregate(self._snapshot())

    def aio_stats(self) -> Dict[PriorityTier, TierAIOStats]:
        return self.engine.aggregator.aio_stats_by_tier(self._snapshot())

    @timed("recompute_many")
    def recompute_many(self, keyword_ids: Iterable[str], rescore: bool = False) -> BatchRecomputeResult:
        """Refresh priority (and optionally the AIO analysis) for the given ids.

        Ids that are not in the catalog are skipped and reported in
        ``skipped_ids`` rather than raised.
        """
        result = BatchRecomputeResult()
        seen = set()

        for keyword_id in keyword_ids:
            if keyword_id in seen:
                continue
            seen.add(keyword_id)

            lock = self._lock_for(keyword_id)
            if lock is None:
                result.skipped_ids.append(keyword_id)
                continue

            with lock:
                current = self.get(keyword_id)
                if current is None:
                    result.skipped_ids.append(keyword_id)
                    continue

                priority = self.engine.classify(current.search_volume)
                changes = {
                    "priority": priority,
                    "priority_info": self.engine.tier_info(priority),
                    "updated_at": datetime.now(),
                }
                if rescore:
                    analysis = self.engine.score(current.text)
                    changes["aio_score"] = analysis.score
                    changes["aio_analysis"] = analysis

                updated = replace(current, **changes)
                with self._lock:
                    self._records[keyword_id] = updated
                result.updated.append(updated)

        if result.skipped_ids:
            logger.warning(f"Batch recompute skipped {len(result.skipped_ids)} unknown ids: {result.skipped_ids}")
        if self.metrics:
            self.metrics.record_batch_recompute(len(result.updated), len(result.skipped_ids))
            if rescore:
                self.metrics.record_score(len(result.updated))
        logger.info(f"Batch recompute refreshed {len(result.updated)} keywords")
        return result

    def analyze_many(self, keyword_ids: Iterable[str]) -> List[Dict]:
        """Fresh AIO analyses for the ids present in the catalog, without storing them"""
        pairs = []
        for keyword_id in keyword_ids:
            record = self.get(keyword_id)
            if record is not None:
                pairs.append((record.id, record.text))
        results = self.engine.scorer.score_many(pairs)
        if self.metrics:
            self.metrics.record_score(len(results))
        return results

    def seed_sample_data(self) -> List[KeywordRecord]:
        records = [
            self.create(sample["text"], sample["search_volume"], sample["cpc"], KeywordStatus.ACTIVE)
            for sample in SAMPLE_KEYWORDS
        ]
        logger.info(f"Seeded catalog with {len(records)} sample keywords")
        return records


def recompute_many(keyword_ids: Iterable[str], catalog: KeywordCatalog,
                   rescore: bool = False) -> BatchRecomputeResult:
    return catalog.recompute_many(keyword_ids, rescore=rescore)
