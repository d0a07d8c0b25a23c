from bs4 import BeautifulSoup, Tag

ROSTER = ["5a", "5b", "6a", "6b", "7a", "10b"]


def make_table(rows_html: str, css_class: str = "mon_list") -> Tag:
    """Wraps table rows in a document and returns the <table> element."""
    soup = BeautifulSoup(f"<html><body><table class=\"{css_class}\">{rows_html}</table></body></html>", "lxml")
    return soup.select_one("table")


def make_row(cells_html: str, css_class: str = "list odd") -> Tag:
    """Builds a single <tr> from cell markup."""
    return make_table(f"<tr class=\"{css_class}\">{cells_html}</tr>").select_one("tr")


def make_page(body_html: str) -> BeautifulSoup:
    return BeautifulSoup(f"<html><head></head><body>{body_html}</body></html>", "lxml")


# --- Sample Pages ---

MONITOR_PAGE = """
<html><head><title>Untis Vertretungsplan</title></head><body>
<table class="mon_head"><tr>
<td valign="bottom"></td>
<td align="right" valign="bottom"><p>Gymnasium Musterstadt<br>Stand: 17.10.2026 07:45</p></td>
</tr></table>
<center>
<div class="mon_title">17.10.2026 Freitag (Seite 1 / 1)</div>
<table class="info">
<tr class="info"><th class="info" colspan="2">Nachrichten zum Tag</th></tr>
<tr class="info"><td class="info" colspan="2">Abwesende Lehrer: MUE</td></tr>
</table>
<table class="mon_list">
<tr class="list"><th class="list">Klasse(n)</th><th class="list">Stunde</th><th class="list">Fach</th><th class="list">Art</th><th class="list">Raum</th></tr>
<tr class="list odd"><td class="list">5-6</td><td class="list">3</td><td class="list"><s>M</s>→Ph</td><td class="list">Vertretung</td><td class="list">B12</td></tr>
<tr class="list even"><td class="list">7a</td><td class="list">4</td><td class="list">D</td><td class="list">Entfall</td><td class="list">---</td></tr>
</table>
</center>
</body></html>
"""

CLASS_PAGE = """
<html><body>
<div class="mon_title">17.10.2026 Freitag</div>
<table class="info">
<tr class="info"><th class="info">Nachrichten zum Tag</th></tr>
<tr class="info"><td class="info">Wandertag 7a</td></tr>
</table>
<table class="subst">
<tr class="list"><th class="list">Stunde</th><th class="list">Fach</th><th class="list">Art</th><th class="list">Raum</th></tr>
<tr class="list odd"><td class="list">3</td><td class="list">M</td><td class="list">Entfall</td><td class="list">---</td></tr>
</table>
</body></html>
"""

MONITOR_COLUMNS = ["class", "lesson", "subject", "type", "room"]
CLASS_PAGE_COLUMNS = ["lesson", "subject", "type", "room"]
