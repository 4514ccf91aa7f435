"""
Pytest plugin printing one line per finished test.

Enable with ``-p stream_assertions.reporting --print-outcomes``. Passing
tests print a check mark; failures print a cross, the failing line and the
failure text, indented.
"""
import re
from typing import Optional

import pytest

PASSED_MARK = "✅"
FAILED_MARK = "❌"

_LOCATION_EXPR = re.compile(r"^(?P<path>[^\s:]+\.py):(?P<line>\d+):", re.MULTILINE)


def pytest_addoption(parser) -> None:
    group = parser.getgroup("stream-assertions")
    group.addoption(
        "--print-outcomes",
        action="store_true",
        default=False,
        help="print a pass/fail line with the failing source line for every test",
    )


def failure_line(report) -> Optional[int]:
    """Line number of the failure inside the test file, if it can be found."""
    text = str(report.longrepr) if report.longrepr is not None else ""
    test_path = report.nodeid.split("::", 1)[0]
    matches = list(_LOCATION_EXPR.finditer(text))
    for match in reversed(matches):
        if match.group("path").endswith(test_path) or test_path.endswith(match.group("path")):
            return int(match.group("line"))
    if matches:
        return int(matches[-1].group("line"))
    return None


def format_report(report) -> Optional[str]:
    if report.when != "call" and not report.failed:
        return None
    if report.passed:
        return PASSED_MARK
    if report.failed:
        description = getattr(report, "longreprtext", "") or str(report.longrepr)
        description = "\n".join(
            "\t" + line for line in description.strip().splitlines()[-5:]
        )
        line = failure_line(report)
        if line is not None:
            return f"{FAILED_MARK} Tests failed at line {line} with:\n{description}"
        return f"{FAILED_MARK} Tests failed with:\n{description}"
    return None


class OutcomePrinter:
    def __init__(self, config) -> None:
        self._writer = config.get_terminal_writer()

    def pytest_runtest_logreport(self, report) -> None:
        line = format_report(report)
        if line is not None:
            self._writer.line()
            self._writer.line(line)


@pytest.hookimpl(trylast=True)
def pytest_configure(config) -> None:
    if config.getoption("print_outcomes"):
        config.pluginmanager.register(OutcomePrinter(config), "stream-assertions-printer")
