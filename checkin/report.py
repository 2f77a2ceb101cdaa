"""
report.py - Attendee List Rendering
====================================
Turns the coordinator's current attendee snapshot into plain text for the
terminal.

Output Columns:
---------------
- Sel      : [x] selected, [ ] selectable, [-] already checked in
- UniqueId : The attendee's unique identifier (what `toggle` expects)
- Name     : Attendee name with meal preference in parentheses
- Status   : "Checked In" / "Not Checked In", plus " | Table: N" when known
"""

from typing import Iterable

import pandas as pd

from .models import Attendee


COLUMNS = ["Sel", "UniqueId", "Name", "Status"]


def attendee_status(attendee: Attendee) -> str:
    """
    Status text for one attendee.

    Examples:
        checked in, table "7"  -> "Checked In | Table: 7"
        checked in, no table   -> "Checked In"
        not checked in         -> "Not Checked In"
    """
    if not attendee.is_checked_in:
        return "Not Checked In"
    if attendee.table_no:
        return f"Checked In | Table: {attendee.table_no}"
    return "Checked In"


def selection_mark(attendee: Attendee, selected: bool) -> str:
    if attendee.is_checked_in:
        return "[-]"
    return "[x]" if selected else "[ ]"


def attendees_frame(attendees: Iterable[Attendee], selected_ids=()) -> pd.DataFrame:
    """One row per attendee, in the order the server returned them."""
    selected = set(selected_ids)
    rows = [
        {
            "Sel": selection_mark(a, a.unique_id in selected),
            "UniqueId": a.unique_id,
            "Name": f"{a.name} ({a.meal_preference})" if a.meal_preference else a.name,
            "Status": attendee_status(a),
        }
        for a in attendees
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def render_attendees(attendees, selected_ids=()) -> str:
    """Heading plus table, or an empty string when there is nothing to show."""
    attendees = list(attendees)
    if not attendees:
        return ""

    frame = attendees_frame(attendees, selected_ids)
    heading = f"Attendees for Email: {attendees[0].email}"
    return f"{heading}\n{frame.to_string(index=False)}"
