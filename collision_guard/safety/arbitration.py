from __future__ import annotations

from typing import Iterable

from collision_guard.utils.types import RiskLevel, ThreatAssessment, Verdict


def arbitrate(assessments: Iterable[ThreatAssessment]) -> Verdict:
    """
    Reduce an ordered sequence of per-threat assessments to one verdict.

    Worst wins under SAFE < WARNING < DANGER. Among equal levels the first
    occurrence is kept, so a later threat only replaces the running one
    when it is strictly worse. SAFE assessments never contribute fields.
    """
    highest: ThreatAssessment | None = None
    for item in assessments:
        if item.level == RiskLevel.SAFE:
            continue
        if highest is None or item.level > highest.level:
            highest = item
    if highest is None:
        return Verdict.safe()
    return Verdict.from_assessment(highest)
