"""Package information reporting for the package inspector."""

import csv
import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment

from ..engine.query_interface import PackageQueryInterface


class ReportFormat(Enum):
    """Supported report formats."""
    HTML = "html"
    JSON = "json"
    CSV = "csv"


PACKAGE_REPORT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        table { border-collapse: collapse; }
        th, td { border: 1px solid #ddd; padding: 4px 8px; text-align: left; }
        td.right { text-align: right; }
        pre.box { background-color: #f5f5f5; border: 1px solid #ccc; padding: 8px; }
    </style>
</head>
<body>
<h1>{{ title }}</h1>
<p>Generated: {{ generated_at }}</p>

<h2>Packages</h2>
<p>Installed packages:</p>
<table>
    <tr><th>Package</th><th>Path</th><th>UID</th><th>Flags</th></tr>
{% for row in packages %}
    <tr>
        <td>{% if row.link %}<a href="{{ row.link }}">{{ row.package }}</a>{% else %}{{ row.package }}{% endif %}</td>
        <td>{{ row.path or '' }}</td>
        <td class="right">{{ row.uid }}</td>
        <td class="right">{{ row.flags }}</td>
    </tr>
{% endfor %}
</table>

<h2>UserIDs</h2>
{% for section in uids %}
<h3 id="{{ section.anchor }}">{{ section.title }}</h3>
<p>Packages:</p>
{% for info in section.packages %}
<pre class="box">
{{ info | join('\n') }}
</pre>
{% endfor %}
<p>Permissions:</p>
<pre class="box">
{% for permission in section.permissions %}             {{ permission }}
{% endfor %}</pre>
{% endfor %}

<h2>Permissions</h2>
{% for entry in permissions %}
<h3>{{ entry.name }}</h3>
<ul>
{% for line in entry.lines %}
    <li>{{ line }}</li>
{% endfor %}
</ul>
{% endfor %}
</body>
</html>
"""


class PackageReportGenerator:
    """Render aggregated package information as HTML, CSV or JSON."""

    def __init__(self, query: PackageQueryInterface, output_dir: str = "reports",
                 table_name: str = "package_list"):
        """Initialize the report generator.

        Args:
            query: Query interface over a finished aggregation run
            output_dir: Directory to save generated reports
            table_name: Base name of the package table export
        """
        self.query = query
        self.output_dir = Path(output_dir)
        self.table_name = table_name
        self.logger = logging.getLogger(__name__)
        self.template_env = Environment(autoescape=True)

    @classmethod
    def from_config(cls, query: PackageQueryInterface, config) -> 'PackageReportGenerator':
        """Create a generator from an InspectorConfig."""
        return cls(query, output_dir=config.output_dir, table_name=config.csv_table_name)

    def generate_reports(self, formats: List[str]) -> List[str]:
        """Generate one report per format name ("html", "csv", "json").

        Returns:
            Paths of the generated reports
        """
        outputs = []
        for name in formats:
            output = self.generate_report(ReportFormat(name.lower()))
            if output:
                outputs.append(output)
        return outputs

    def generate_report(self, report_format: ReportFormat = ReportFormat.HTML) -> Optional[str]:
        """Generate a package information report.

        Args:
            report_format: Output format for the report

        Returns:
            Path to the generated report file, None if nothing was aggregated
        """
        if not self.query.loaded:
            self.logger.warning("[Report] No package information loaded, skipping report")
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"[Report] Generating {report_format.value} package report")

        if report_format == ReportFormat.HTML:
            return self._generate_html_report()
        elif report_format == ReportFormat.JSON:
            return self._generate_json_report()
        elif report_format == ReportFormat.CSV:
            return self._generate_csv_report()
        else:
            raise ValueError(f"Unsupported report format: {report_format}")

    def build_package_rows(self) -> List[Dict[str, Any]]:
        """Rows of the installed package table, sorted by package name."""
        rows = []
        for package in self.query.packages_sorted():
            owner = self.query.owner_of(package)
            rows.append({
                'package': package.name,
                'path': package.install_path,
                'uid': package.owner_uid,
                'flags': package.flags_hex,
                'link': self.query.link_to_uid(owner)
            })
        return rows

    def build_uid_sections(self) -> List[Dict[str, Any]]:
        """One section per identity, ordered by uid."""
        sections = []
        for identity in self.query.identities():
            anchor = self.query.anchor_for(identity)
            sections.append({
                'uid': identity.uid,
                'title': identity.full_name,
                'anchor': anchor.anchor_id if anchor else f"uid_{identity.uid}",
                'packages': [package.dump_info() for package in self.query.packages_of(identity)],
                'package_names': list(identity.package_names),
                'permissions': identity.permissions.names()
            })
        return sections

    def build_permission_sections(self) -> List[Dict[str, Any]]:
        """Permissions sorted by name, with one line per holder."""
        return [
            {
                'name': entry.name,
                'lines': [holder.label for holder in entry.holders]
            }
            for entry in self.query.permission_listing()
        ]

    def _generate_html_report(self) -> str:
        """Generate HTML report."""
        template = self.template_env.from_string(PACKAGE_REPORT_TEMPLATE)
        html_content = template.render(
            title="Package info",
            generated_at=datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            packages=self.build_package_rows(),
            uids=self.build_uid_sections(),
            permissions=self.build_permission_sections()
        )

        output_file = self.output_dir / "package_info.html"
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(html_content)

        return str(output_file)

    def _generate_json_report(self) -> str:
        """Generate JSON report."""
        report = {
            'generated_at': datetime.now().isoformat(),
            'packages': [
                {
                    'sequence_id': package.sequence_id,
                    'name': package.name,
                    'path': package.install_path,
                    'original_path': package.original_path,
                    'uid': package.owner_uid,
                    'flags': package.flags,
                    'permissions': package.permissions.names()
                }
                for package in self.query.packages_sorted()
            ],
            'uids': [
                {
                    'uid': section['uid'],
                    'name': section['title'],
                    'packages': section['package_names'],
                    'permissions': section['permissions']
                }
                for section in self.build_uid_sections()
            ],
            'permissions': self.build_permission_sections()
        }

        output_file = self.output_dir / "package_info.json"
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2)

        return str(output_file)

    def _generate_csv_report(self) -> str:
        """Generate CSV export of the package table."""
        output_file = self.output_dir / f"{self.table_name}.csv"

        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['Package', 'Path', 'UID', 'Flags'])
            for row in self.build_package_rows():
                writer.writerow([row['package'], row['path'] or '', row['uid'], row['flags']])

        return str(output_file)
