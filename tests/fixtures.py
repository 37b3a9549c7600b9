"""HTML builders for release table tests."""

from bs4 import BeautifulSoup

HEADER = "<tr><th>Day</th><th>Artist</th><th>Album</th></tr>"


def table_rows(rows):
    """Render rows given as tuples of cell texts."""
    return "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows
    )


def month_section(month, rows):
    """A month heading followed by its release table, as on the wiki page."""
    return (
        f'<h3><span class="mw-headline" id="{month}">{month}</span></h3>\n'
        f'<table class="wikitable">{HEADER}{table_rows(rows)}</table>\n'
    )


def page(*sections):
    return BeautifulSoup(f"<html><body>{''.join(sections)}</body></html>", "lxml")
