"""
Account Hierarchy Grouping

Rebuilds two-level parent/child groups from a flat, already searched,
filtered and sorted working set.

Rules:
- A record is attached as a child only when its declared parent is in the
  working set and that parent is itself a group root.
- Everything else is a root: no parent, a parent outside the working set,
  a parent equal to itself, or a parent that is already someone's child.
  Only one level of nesting exists, so the children of a child surface as
  roots of their own.
- Where parent links form a cycle, the first record of the cycle reached
  in input order is made a root.
- Roots keep input order; children keep the order they were encountered.

Every input record ends up in exactly one group, as a root or as one
root's child.
"""

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Generic, Hashable, Optional, Sequence, TypeVar

Record = TypeVar("Record")

_ROOT = False
_CHILD = True


@dataclass(frozen=True)
class AccountGroup(Generic[Record]):
    """A root record and the children attached to it."""
    root: Record
    children: tuple = field(default_factory=tuple)

    @property
    def is_standalone(self) -> bool:
        return not self.children

    def __len__(self) -> int:
        return 1 + len(self.children)


def build_account_groups(
    records: Sequence[Record],
    key: Callable[[Record], Hashable] = attrgetter("id"),
    parent_key: Callable[[Record], Optional[Hashable]] = attrgetter("parent_id")
) -> list[AccountGroup]:
    """Partition records into parent/child groups."""
    records = list(records)

    # Parent references resolve to the first record carrying that id
    index_by_id: dict[Any, int] = {}
    for i, record in enumerate(records):
        index_by_id.setdefault(key(record), i)

    def parent_index(i: int) -> Optional[int]:
        parent_id = parent_key(records[i])
        if parent_id is None or parent_id == "" or parent_id == key(records[i]):
            return None
        parent = index_by_id.get(parent_id)
        if parent is None or parent == i:
            return None
        return parent

    status: dict[int, bool] = {}
    for start in range(len(records)):
        _resolve(start, parent_index, status)

    children: dict[int, list] = {}
    for i in range(len(records)):
        if status[i] == _CHILD:
            children.setdefault(parent_index(i), []).append(records[i])

    return [
        AccountGroup(root=records[i], children=tuple(children.get(i, ())))
        for i in range(len(records))
        if status[i] == _ROOT
    ]


def _resolve(start: int, parent_index: Callable[[int], Optional[int]], status: dict) -> None:
    """Walk up the parent chain from `start` and settle every record on it."""
    path = []
    on_path = set()
    current = start
    while current is not None and current not in status:
        if current in on_path:
            # Cycle: break it here
            status[current] = _ROOT
            break
        path.append(current)
        on_path.add(current)
        current = parent_index(current)

    for i in reversed(path):
        if i in status:
            continue
        parent = parent_index(i)
        if parent is None:
            status[i] = _ROOT
        else:
            # Attach only beneath a root
            status[i] = _CHILD if status[parent] == _ROOT else _ROOT


def parent_group_count(groups: Sequence[AccountGroup]) -> int:
    """Number of groups that actually have children."""
    return sum(1 for group in groups if not group.is_standalone)


def flatten_groups(groups: Sequence[AccountGroup]) -> list:
    """All records in display order: each root followed by its children."""
    flattened = []
    for group in groups:
        flattened.append(group.root)
        flattened.extend(group.children)
    return flattened
