"""
bench/aggregation.py — 试验记录分组

按 (planner, algorithm) 分组 TrialRecord, 每组独立计算列集合
(该组记录中出现过的全部属性的并集, 按列名排序). 不同组的列数可以不同.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Tuple

from .models import PropertyType, ReportGroup, TrialRecord, column_label

logger = logging.getLogger(__name__)


def property_union(records: Iterable[TrialRecord]) -> List[Tuple[str, PropertyType]]:
    """组内属性并集: 先按首次出现收集, 再按列名排序."""
    seen: Dict[Tuple[str, PropertyType], None] = {}
    for rec in records:
        for key in rec.columns():
            seen.setdefault(key, None)
    return sorted(seen, key=lambda k: column_label(*k))


class ResultAggregator:
    """TrialRecord 列表 → 有序 ReportGroup 列表.

    Args:
        descriptions: {planner id: 报告中使用的规划器描述},
            缺失时使用 planner id
    """

    def __init__(self, descriptions: Mapping[str, str] = None):
        self.descriptions = dict(descriptions or {})

    def aggregate(self, records: Iterable[TrialRecord],
                  expected: Iterable[Tuple[str, str]] = ()) -> List[ReportGroup]:
        """分组; ``expected`` 中的 (planner, algorithm) 即使没有记录也保留一组.

        组顺序为首次出现顺序 (expected 在前).
        """
        buckets: Dict[Tuple[str, str], List[TrialRecord]] = {}
        for key in expected:
            buckets.setdefault(tuple(key), [])
        for rec in records:
            buckets.setdefault(rec.group_key, []).append(rec)

        groups = []
        for (planner_id, algorithm_id), recs in buckets.items():
            group = ReportGroup(
                planner_id=planner_id,
                algorithm_id=algorithm_id,
                description=self.descriptions.get(planner_id, planner_id),
                properties=property_union(recs),
                records=list(recs),
            )
            logger.debug("Group %s: %d runs, %d properties",
                         group.title, group.n_runs, len(group.properties))
            groups.append(group)
        return groups
