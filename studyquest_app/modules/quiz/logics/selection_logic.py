"""
Selection Logic - Map the model's question choices back onto candidate rows.
"""
from typing import Dict, Iterable, List, Sequence, Tuple, TypeVar

T = TypeVar('T')


def resolve_selection(
    candidates: Sequence[T],
    selected_ids: Iterable[int],
    count: int,
    key=lambda item: item.question_id,
) -> Tuple[List[T], List[int]]:
    """
    Keep the selected candidates in the model's order, ignoring unknown and duplicate ids.

    When fewer than ``count`` were matched, fill from the remaining candidates in
    their original order. Returns (chosen items, ids that came from the model).
    """
    by_id: Dict[int, T] = {key(item): item for item in candidates}
    chosen: List[T] = []
    picked_ids: List[int] = []

    for question_id in selected_ids:
        if len(chosen) >= count:
            break
        item = by_id.get(question_id)
        if item is None or question_id in picked_ids:
            continue
        chosen.append(item)
        picked_ids.append(question_id)

    if len(chosen) < count:
        for item in candidates:
            if len(chosen) >= count:
                break
            if key(item) not in picked_ids:
                chosen.append(item)

    return chosen, picked_ids
