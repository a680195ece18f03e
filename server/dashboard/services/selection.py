"""
Student roster filtering and selection.
"""
from typing import Iterable, List

from dashboard.schemas import Section, Standard, Student


class SelectionError(ValueError):
    pass


def find_standard(standards: Iterable[Standard], standard_id: str) -> Standard:
    for standard in standards:
        if standard.id == standard_id:
            return standard
    raise SelectionError("Selected grade is not available")


def find_section(standard: Standard, section_id: str) -> Section:
    for section in standard.sections:
        if section.id == section_id:
            return section
    raise SelectionError(f"Section is not part of {standard.name}")


def filter_students(students: List[Student], search: str) -> List[Student]:
    """Case-insensitive substring match on "first last" or email."""
    term = (search or "").strip().lower()
    if not term:
        return list(students)
    return [
        s for s in students
        if term in s.full_name.lower() or term in (s.email or "").lower()
    ]


def resolve_selection(
    roster: List[Student],
    student_ids: List[str],
    select_all: bool = False,
    search: str = "",
) -> List[Student]:
    """
    Turn a selection request into Student records, in roster order.

    select_all picks the whole visible roster (the roster after `search`);
    otherwise every requested id must be on the roster.
    """
    if select_all:
        selected = filter_students(roster, search)
    else:
        wanted = set(student_ids)
        known = {s.id for s in roster}
        unknown = [sid for sid in student_ids if sid not in known]
        if unknown:
            raise SelectionError(f"Unknown student id(s): {', '.join(unknown)}")
        selected = [s for s in roster if s.id in wanted]

    if not selected:
        raise SelectionError("Please select at least one student")
    return selected
