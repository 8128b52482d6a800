"""Employee records and the tree nodes built from them."""

import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import asdict, dataclass, field, fields

from orgchart.utils.ids import normalize_id
from orgchart.utils.types import ChangeType

DEFAULT_FTE = 1.0

# camelCase keys used by the record producer, plus the legacy "manager" column
_FIELD_ALIASES = {
    "managerId": "manager_id",
    "manager": "manager_id",
    "jobFamily": "job_family",
    "managementLevel": "management_level",
}


def parse_fte(value: object) -> float:
    """Coerce an FTE cell to float, defaulting to 1.0 when absent or unparseable."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_FTE
    try:
        fte = float(value)
    except (TypeError, ValueError):
        return DEFAULT_FTE
    return DEFAULT_FTE if math.isnan(fte) else fte


def _text(value: object) -> str:
    match value:
        case None:
            return ""
        case float() if math.isnan(value):
            return ""
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value).strip()


@dataclass(frozen=True)
class EmployeeRecord:
    id: str
    manager_id: str = ""
    name: str = ""
    title: str = ""
    fte: float = DEFAULT_FTE
    location: str = ""
    job_family: str = ""
    management_level: str = ""

    @classmethod
    def from_row(cls, row: Mapping) -> "EmployeeRecord":
        """Build a record from a field-mapped row (snake_case or camelCase keys)."""
        values: dict[str, object] = {}
        for key, value in row.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in RECORD_FIELDS and name not in values:
                values[name] = value

        return cls(
            id=_text(values.get("id")),
            manager_id=_text(values.get("manager_id")),
            name=_text(values.get("name")),
            title=_text(values.get("title")),
            fte=parse_fte(values.get("fte")),
            location=_text(values.get("location")),
            job_family=_text(values.get("job_family")),
            management_level=_text(values.get("management_level")),
        )

    @property
    def key(self) -> str:
        return normalize_id(self.id)

    @property
    def manager_key(self) -> str:
        return normalize_id(self.manager_id)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def as_dict(self) -> dict[str, str | float]:
        return asdict(self)


RECORD_FIELDS = tuple(f.name for f in fields(EmployeeRecord))


def coerce_records(employees: Sequence[EmployeeRecord | Mapping]) -> list[EmployeeRecord]:
    """Accept records or plain mappings; anything but a list/tuple is a caller bug."""
    if not isinstance(employees, (list, tuple)):
        raise TypeError(
            f"Expected a list of employee records, got {type(employees).__name__}"
        )

    records = []
    for item in employees:
        match item:
            case EmployeeRecord():
                records.append(item)
            case Mapping():
                records.append(EmployeeRecord.from_row(item))
            case _:
                raise TypeError(f"Unsupported employee record: {item!r}")
    return records


@dataclass(eq=False)
class HierarchyNode:
    """One employee in a built tree.

    Children are owned singly by their parent; there is no parent pointer.
    Use ``visibility.build_parent_index`` when the upward direction is needed.
    """

    record: EmployeeRecord
    children: list["HierarchyNode"] = field(default_factory=list)
    expanded: bool = False
    x: float = 0.0
    y: float = 0.0
    subtree_width: float = 0.0
    change_type: ChangeType | None = None
    previous_manager_id: str | None = None
    previous_manager_name: str | None = None

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def key(self) -> str:
        return self.record.key

    @property
    def manager_id(self) -> str:
        return self.record.manager_id

    @property
    def name(self) -> str:
        return self.record.name

    def walk(self) -> Iterator["HierarchyNode"]:
        """Pre-order over every node below (and including) this one, expanded or not."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def as_dict(self) -> dict:
        return {
            **self.record.as_dict(),
            "x": self.x,
            "y": self.y,
            "subtree_width": self.subtree_width,
            "expanded": self.expanded,
            "has_children": bool(self.children),
            "change_type": str(self.change_type) if self.change_type else None,
            "previous_manager_id": self.previous_manager_id,
            "previous_manager_name": self.previous_manager_name,
        }
