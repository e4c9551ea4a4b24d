from typing import Dict, List, Optional, Sequence

from ..logic.constants import (
    TIER_ORDER,
    SIZE_DESCRIPTIONS,
    POLICY_DESCRIPTIONS,
    SizeCategory,
    Region,
    TestingPolicy,
)
from ..logic.contracts import Constraints, StudentProfile
from .instructions import (
    GUARDRAILS,
    SYSTEM_ROLE_DEFINITION,
    JSON_OUTPUT_FORMAT_INSTRUCTION,
    REFERENCE_TABLES,
)

# Exclusion hints shown when the student wants to avoid test-required schools
MAX_EXCLUDED_HINTS = 10


def build_system_prompt() -> str:
    """Constructs the static system prompt."""
    rules_str = "\n".join([f"- {rule}" for rule in GUARDRAILS])

    return f"""{SYSTEM_ROLE_DEFINITION}

RULES (NON-NEGOTIABLE):
{rules_str}

OUTPUT FORMAT:
{JSON_OUTPUT_FORMAT_INSTRUCTION}

REFERENCE:
{REFERENCE_TABLES}
"""


def describe_constraints(
    constraints: Constraints,
    test_required: Optional[Sequence[str]] = None
) -> List[str]:
    """
    Render the hard constraints as plain-language lines.
    A dimension that is empty or allows every value produces no line.
    """
    lines = []

    if constraints.sizes and len(constraints.sizes) < len(SizeCategory):
        sizes = [SizeCategory(s).value for s in constraints.sizes]
        descs = " or ".join(f"{s} ({SIZE_DESCRIPTIONS[s]} students)" for s in sizes)
        lines.append(f"SIZE: undergraduate enrollment must be {descs}")

    if constraints.regions and len(constraints.regions) < len(Region):
        regions = [Region(r).value for r in constraints.regions]
        lines.append(f"REGION: must be located in the {' or '.join(regions)}")

    if constraints.policies and len(constraints.policies) < len(TestingPolicy):
        policies = [TestingPolicy(p).value for p in constraints.policies]
        line = f"TESTING: must be {' or '.join(POLICY_DESCRIPTIONS[p] for p in policies)}"
        if TestingPolicy.REQUIRED.value not in policies and test_required:
            hints = [name.title() for name in test_required][:MAX_EXCLUDED_HINTS]
            line += f" (these require tests, exclude them: {', '.join(hints)})"
        lines.append(line)

    return lines


def build_student_summary(profile: StudentProfile) -> str:
    """One-block summary of the student for probability estimates."""
    parts = []
    if profile.rigor_score is not None:
        parts.append(f"Rigor {profile.rigor_score:g}/100")
    if profile.gpa_weighted is not None:
        parts.append(f"GPA {profile.gpa_weighted:g} (weighted)")
    if profile.effective_sat_total:
        parts.append(f"SAT {profile.effective_sat_total}")
    if profile.act_composite:
        parts.append(f"ACT {profile.act_composite}")

    summary = f"Student: {', '.join(parts) if parts else 'no academic data provided'}"
    if profile.school_context:
        summary += f"\nContext: {profile.school_context}"
    if profile.academic_summary:
        summary += f"\nAcademic: {profile.academic_summary}"
    return summary


def build_initial_request(
    constraints: Constraints,
    per_tier: int,
    test_required: Optional[Sequence[str]] = None
) -> str:
    """Instructions for the first generation call (K per tier)."""
    lines = describe_constraints(constraints, test_required)
    filter_block = "\n".join(lines) if lines else "No filters. Include geographic and size diversity."

    return f"""Return EXACTLY {per_tier * len(TIER_ORDER)} colleges: {per_tier} reach, {per_tier} match, {per_tier} safety.
FILTER CONSTRAINTS (all must hold):
{filter_block}
Use real enrollment numbers."""


def build_fill_request(
    deficits: Dict[str, int],
    exclude_names: Sequence[str],
    constraints: Constraints,
    test_required: Optional[Sequence[str]] = None
) -> str:
    """
    Instructions for a fill round: how many more per deficient tier, what to
    exclude and which constraints still hold.
    """
    wanted = ", ".join(
        f"{deficits[tier.value]} {tier.value}"
        for tier in TIER_ORDER
        if deficits.get(tier.value, 0) > 0
    )
    total = sum(deficits.values())
    lines = describe_constraints(constraints, test_required)

    request = f"Return {total} ADDITIONAL colleges: {wanted}. Same JSON format."
    if lines:
        request += "\nFILTER CONSTRAINTS (all must hold):\n" + "\n".join(lines)
    if exclude_names:
        request += f"\nEXCLUDE these already-considered schools: {', '.join(exclude_names)}"
    request += "\nInclude lesser-known regional and state schools. Use real enrollment numbers."
    return request
