"""
Data Masking Layer

Replaces learner names with "Student N" labels for every viewer that is
not an admin. Admins get the report object back unchanged; any other role,
including unknown ones, gets a masked deep copy.

Two strategies assign the numbers:
- StableMaskingStrategy (default): numbers users by ascending user id, so
  the same user keeps the same label across pages and views.
- SequentialMaskingStrategy (legacy): numbers users in first-seen order
  within one masking call.

Only ``user_name`` strings are replaced; numbers and ids are left alone.

Author: DSP Development Team
Version: 1.0.0
"""

import copy
from typing import Any, Dict, Iterable, List, Optional

from ..users.models import Role

MASK_LABEL = "Student {number}"


class MaskingStrategy:
    """Maps a user id to a synthetic label."""

    def label_for(self, user_id: Any) -> str:
        raise NotImplementedError

    def mask_rows(self, rows: Iterable[Dict[str, Any]]) -> None:
        """Replace ``user_name`` in place in every row that has one."""
        for row in rows:
            if "user_name" in row:
                row["user_name"] = self.label_for(row.get("user_id", row["user_name"]))


class SequentialMaskingStrategy(MaskingStrategy):
    """First-seen numbering; labels are only consistent within one instance."""

    def __init__(self):
        self._labels: Dict[Any, str] = {}

    def label_for(self, user_id: Any) -> str:
        if user_id not in self._labels:
            self._labels[user_id] = MASK_LABEL.format(number=len(self._labels) + 1)
        return self._labels[user_id]


class StableMaskingStrategy(MaskingStrategy):
    """Numbering precomputed from the sorted user ids."""

    def __init__(self, user_ids: Iterable[Any] = ()):
        self._labels: Dict[Any, str] = {
            user_id: MASK_LABEL.format(number=number)
            for number, user_id in enumerate(sorted(set(user_ids)), start=1)
        }

    @classmethod
    def for_report(cls, report: Dict[str, Any]) -> "StableMaskingStrategy":
        return cls(row["user_id"] for row in _identity_rows(report) if row.get("user_id") is not None)

    def label_for(self, user_id: Any) -> str:
        if user_id not in self._labels:
            # ids outside the precomputed map are appended after it
            self._labels[user_id] = MASK_LABEL.format(number=len(self._labels) + 1)
        return self._labels[user_id]


def _identity_rows(report: Dict[str, Any]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    rows.extend((report.get("user_performance_matrix") or {}).get("matrix") or [])
    rows.extend((report.get("progress_tracking") or {}).get("user_details") or [])
    rows.extend(report.get("recent_attempts") or [])
    return rows


def is_unmasked_viewer(viewer_role: Optional[str]) -> bool:
    return viewer_role == Role.ADMIN


def mask_report(
    report: Dict[str, Any],
    viewer_role: Optional[str],
    strategy: Optional[MaskingStrategy] = None,
) -> Dict[str, Any]:
    """
    Mask learner identities in an analytics report.

    Args:
        report: Report as produced by build_report (or realtime analytics)
        viewer_role: Role of the viewer
        strategy: Numbering strategy; defaults to StableMaskingStrategy

    Returns:
        The same report object for admins, a masked copy for everyone else
    """
    if is_unmasked_viewer(viewer_role):
        return report

    masked = copy.deepcopy(report)
    strategy = strategy or StableMaskingStrategy.for_report(masked)
    strategy.mask_rows(_identity_rows(masked))
    return masked
