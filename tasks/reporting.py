# tasks/reporting.py

from datetime import datetime
from html import escape
from pathlib import Path
from typing import Dict, List

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{report_title}</title>
<style>
body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; margin: 2rem; color: #2c3e50; }}
table {{ border-collapse: collapse; width: 100%; margin-bottom: 2rem; }}
th, td {{ border: 1px solid #ddd; padding: 0.4rem 0.6rem; text-align: left; vertical-align: top; }}
th {{ background: #f4f6f8; }}
code {{ background: #f4f6f8; padding: 0 0.2rem; }}
.footer {{ color: #7f8c8d; font-size: 0.85rem; }}
</style>
</head>
<body>
<h1>{report_title}</h1>
{summary_html}
{sections_html}
<p class="footer">Report generated on {generation_date}</p>
</body>
</html>
"""

HIGHLIGHT_WORDS = ("Broken", "Errors", "Dead")


def render_table(headers: List[str], rows: List[List[str]]) -> str:
    """A plain HTML table; every cell is escaped."""
    if not rows:
        return "<p>None found.</p>"
    html = "<table><thead><tr>"
    html += "".join(f"<th>{escape(h)}</th>" for h in headers)
    html += "</tr></thead><tbody>"
    for row in rows:
        html += "<tr>" + "".join(f"<td>{escape(str(cell))}</td>" for cell in row) + "</tr>"
    html += "</tbody></table>"
    return html


def generate_html_report(report_title: str, summary_items: Dict[str, object], sections: List[dict],
                         output_filename: str, report_dir: Path) -> Path:
    """
    Writes a single-page HTML report. `sections` are dicts with a 'title'
    and already-rendered 'content' HTML.
    """
    summary_html = "<h2>Summary</h2><ul>"
    for key, value in summary_items.items():
        style = ' style="color: #c0392b;"' if any(word in key for word in HIGHLIGHT_WORDS) and value else ""
        summary_html += f'<li class="summary-item"{style}>{escape(key)}: <strong>{escape(str(value))}</strong></li>'
    summary_html += "</ul>"

    sections_html = ""
    for section in sections:
        sections_html += f"<h2>{escape(section['title'])}</h2>"
        sections_html += section['content']

    final_html = REPORT_TEMPLATE.format(
        report_title=escape(report_title),
        summary_html=summary_html,
        sections_html=sections_html,
        generation_date=datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    )

    report_dir = Path(report_dir)
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / output_filename
    with open(report_path, 'w', encoding='utf-8', errors='replace') as f:
        f.write(final_html)

    print(f"\n✅ Report successfully generated: {report_path.resolve()}")
    return report_path
