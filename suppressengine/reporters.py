"""
Report generators for suppression evaluation results
"""

import json
import sys
from datetime import datetime
from typing import Optional

from .models import EvaluationResult


class BaseReporter:
    """Base class for reporters"""

    def report(self, result: EvaluationResult, output: Optional[str] = None) -> str:
        """Generate report and optionally write to file"""
        raise NotImplementedError

    def _write_output(self, content: str, output: Optional[str]) -> None:
        """Write content to file or stdout"""
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(content)
        else:
            print(content)


class ConsoleReporter(BaseReporter):
    """Console/terminal output reporter with colors"""

    COLORS = {
        'class': '\033[93m',     # Yellow
        'method': '\033[94m',    # Blue
        'property': '\033[96m',  # Cyan
        'error': '\033[91m',     # Red
        'dim': '\033[90m',       # Gray
        'reset': '\033[0m',
        'bold': '\033[1m',
        'green': '\033[92m',
    }

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        self.use_colors = use_colors and sys.stdout.isatty()
        self.verbose = verbose

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors enabled"""
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def report(self, result: EvaluationResult, output: Optional[str] = None) -> str:
        """Generate console report"""
        lines = []

        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))
        lines.append(self._color("  SUPPRESSION RESULTS", 'bold'))
        lines.append(self._color("=" * 60, 'bold'))
        lines.append("")

        lines.append(f"Classes file: {result.source}")
        lines.append(f"Rules file: {result.rules_file or 'built-in'}")
        lines.append(f"Rules active: {result.rule_count}")
        lines.append(f"Classes evaluated: {len(result)}")
        lines.append("")

        summary = result.summary()
        if summary:
            lines.append(self._color("SUMMARY BY ISSUE:", 'bold'))
            for issue in sorted(summary):
                lines.append(f"  {issue}: {summary[issue]}")
            lines.append("")

        affected = result.get_affected_classes()
        if not affected:
            lines.append(self._color("No suppressions applied.", 'green'))
        else:
            lines.append(self._color(f"SUPPRESSIONS ({result.total_suppressions} total):", 'bold'))
            lines.append("-" * 60)

            for report in affected:
                lines.append("")
                lines.append(f"  {self._color(report.name, 'bold')}")
                for target, issues in report.added.items():
                    kind = target.split(':', 1)[0]
                    lines.append(f"    {self._color(target, kind)}: {', '.join(issues)}")

        if self.verbose:
            untouched = [r.name for r in result if not r.total]
            if untouched:
                lines.append("")
                lines.append(self._color("UNCHANGED:", 'dim'))
                for name in untouched:
                    lines.append(f"  - {name}")

        if result.errors:
            lines.append("")
            lines.append(self._color("ERRORS:", 'error'))
            for error in result.errors:
                lines.append(f"  - {error}")

        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))

        content = "\n".join(lines)
        self._write_output(content, output)
        return content


class JSONReporter(BaseReporter):
    """JSON format reporter"""

    def report(self, result: EvaluationResult, output: Optional[str] = None) -> str:
        """Generate JSON report"""
        report_data = result.to_dict()
        report_data['timestamp'] = datetime.now().isoformat()

        content = json.dumps(report_data, indent=2)
        self._write_output(content, output)
        return content


def get_reporter(format_name: str, **kwargs) -> BaseReporter:
    """Get reporter instance by format name"""
    reporters = {
        'console': ConsoleReporter,
        'json': JSONReporter,
    }

    reporter_class = reporters.get(format_name.lower())
    if not reporter_class:
        raise ValueError(f"Unknown format: {format_name}. Available: {list(reporters.keys())}")

    return reporter_class(**kwargs)
