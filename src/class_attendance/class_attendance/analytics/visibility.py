from __future__ import annotations

from dataclasses import replace

from ..core.constants import HIDDEN_NAME, HIDDEN_ROLL_NUMBER
from ..core.enums import Role
from .model import ClassReport


def apply_visibility(role: Role, report: ClassReport) -> ClassReport:
    """Redact the class report for students.

    Students still get every numeric field (dashboards derive the overall
    present/absent split from them) but no names, roll numbers or at-risk
    list. Staff roles see the report unchanged.
    """

    if role != Role.STUDENT:
        return report

    return replace(
        report,
        full_report=tuple(replace(s, name=HIDDEN_NAME, roll_number=HIDDEN_ROLL_NUMBER) for s in report.full_report),
        at_risk_students=(),
    )
