import logging
import threading
from typing import Dict, Iterator, List, Optional
from ..matching.weighted_matcher import WeightedSimilarityMatcher, validate_features
from ..utils.dataclasses import FeatureVector, IrisRecord, MatchResult

logger = logging.getLogger(__name__)


class IrisDatabase:
    """In-memory store of enrolled iris feature vectors keyed by name.

    Records live in an append-only list; a name -> index mapping gives lookups
    by name. Re-enrolling a name replaces the record in its slot, removal
    leaves an empty slot so indices stay stable. A single lock guards every
    read and write.
    """
    def __init__(self, matcher: Optional[WeightedSimilarityMatcher] = None):
        """Initialize the iris database with the matcher used to score queries."""
        self.matcher = matcher or WeightedSimilarityMatcher()
        self._records: List[Optional[IrisRecord]] = []
        self._index: Dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def layout(self):
        return self.matcher.layout

    def add_identity(self, name: str, features: FeatureVector) -> IrisRecord:
        """Enroll features under a name. An existing name is overwritten."""
        if not name or not name.strip():
            raise ValueError("Identity name must not be empty.")

        features = validate_features(features, self.layout).copy()
        features.setflags(write=False)
        record = IrisRecord(name=name, features=features)

        with self._lock:
            if name in self._index:
                self._records[self._index[name]] = record
                logger.info("Replaced features of identity %r", name)
            else:
                self._index[name] = len(self._records)
                self._records.append(record)
                logger.info("Enrolled identity %r (%d enrolled)", name, len(self._index))

        return record

    def find_best_match(self, query: FeatureVector, quality: float = 1.0) -> MatchResult:
        """Identify a feature vector against every enrolled identity.

        Returns the best accepted identity and its confidence, or
        (None, 0.0) if no identity passes the thresholds.
        """
        if not 0.0 < quality <= 1.0:
            raise ValueError(f"quality must be in (0, 1], got {quality}")

        with self._lock:
            records = [record for record in self._records if record is not None]
            if not records:
                return MatchResult(best_name=None, confidence=0.0)

            query = validate_features(query, self.layout, "query")

            best_score = 0.0  # Higher score is better match
            best_name = None
            best_accepted_score = -1.0

            for record in records:
                breakdown = self.matcher.compare(query, record.features)
                score = self.matcher.confidence(breakdown, quality)
                best_score = max(best_score, score)

                if self.matcher.accepts(breakdown, quality) and score > best_accepted_score:
                    best_accepted_score = score
                    best_name = record.name

        if best_name is not None:
            logger.debug("Matched %r with confidence %.4f", best_name, best_accepted_score)
            return MatchResult(best_name=best_name, confidence=best_accepted_score)

        logger.debug("No match found (best score %.4f)", best_score)
        return MatchResult(best_name=None, confidence=0.0)

    def remove_identity(self, name: str) -> bool:
        """Remove an identity. Returns False if the name is not enrolled."""
        with self._lock:
            index = self._index.pop(name, None)
            if index is None:
                return False
            self._records[index] = None
        logger.info("Removed identity %r", name)
        return True

    def get_record(self, name: str) -> Optional[IrisRecord]:
        """Get the record enrolled under a name."""
        with self._lock:
            index = self._index.get(name)
            return None if index is None else self._records[index]

    def names(self) -> List[str]:
        with self._lock:
            return [record.name for record in self._records if record is not None]

    def get_database_size(self) -> int:
        """Return the number of enrolled identities."""
        return len(self._index)

    def is_database_empty(self) -> bool:
        """Check if the database is empty."""
        return len(self._index) == 0

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return self.get_database_size()

    def __iter__(self) -> Iterator[IrisRecord]:
        with self._lock:
            records = [record for record in self._records if record is not None]
        return iter(records)
