from .detector import ConflictRecord, count_conflicts, detect_conflicts, near_any_airport

__all__ = ["ConflictRecord", "count_conflicts", "detect_conflicts", "near_any_airport"]
