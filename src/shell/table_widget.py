"""HTML Table Widget - Imperative Shell.

Holds the rows of the event table and renders them as an HTML table body.
"""

import html

from src.core.severity import CellStyle
from src.core.transform import TableRow


def _style_attr(style: CellStyle) -> str:
    rules = []
    if style.color:
        rules.append(f"color: {style.color}")
    if style.bold:
        rules.append("font-weight: bold")
    if not rules:
        return ""
    return f' style="{"; ".join(rules)}"'


class HtmlTableWidget:
    """Table widget owning the rows of the table body."""

    def __init__(self) -> None:
        self.rows: list[TableRow] = []

    def clear_rows(self) -> None:
        self.rows = []

    def append_row(self, row: TableRow) -> None:
        self.rows.append(row)

    def to_html(self) -> str:
        """Render the table body.

        Columns: place, magnitude, depth, time. The magnitude cell carries
        the row's style hint.
        """
        lines = ["<tbody>"]
        for row in self.rows:
            lines.append(
                "<tr>"
                f"<td>{html.escape(row.place)}</td>"
                f"<td{_style_attr(row.magnitude_style)}>{html.escape(row.magnitude)}</td>"
                f"<td>{html.escape(row.depth)}</td>"
                f"<td>{html.escape(row.time)}</td>"
                "</tr>"
            )
        lines.append("</tbody>")
        return "\n".join(lines)
