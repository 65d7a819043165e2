"""Cultural compliance tools, served at ``/api/mcp``.

The protocol, compass and framework documents have no supplied content
yet and are served as empty mappings.  Tools acknowledge the request
and point back to community review; they make no decision themselves.
"""

from __future__ import annotations

from gateway.registry import Registry
from gateway.schema import array, boolean, string

registry = Registry("true-review-cultural-compliance")

PHASES = ["planning", "engagement", "codesign", "prototype", "testing", "analysis", "return", "closure"]
COMPASS_POINTS = ["kei_raro", "kei_mua", "kei_runga", "kei_roto", "kei_waho"]

TIKANGA_PROTOCOLS: dict = {}
ETHICAL_COMPASS: dict = {}
PASIFIKA_FRAMEWORKS: dict = {}


def _listing(items: list[str] | None, empty: str = "none listed") -> str:
    return ", ".join(items) if items else empty


@registry.tool(
    "validate_tikanga_compliance",
    "Validate an action or decision against tikanga Māori protocols",
    action=string("The proposed action or decision", required=True),
    context=string("Cultural and situational context", required=True),
    phase=string("Current project phase", required=True, enum=PHASES),
    stakeholders=array("Affected community members/groups"),
)
async def validate_tikanga_compliance(args: dict) -> str:
    return (
        f'Action "{args["action"]}" recorded for tikanga review in the {args["phase"]} phase.\n'
        f"Context: {args['context']}\n"
        f"Stakeholders: {_listing(args.get('stakeholders'))}\n"
        "Confirm with cultural advisors before proceeding."
    )


@registry.tool(
    "ethical_compass_check",
    "Evaluate decision through Kiri Dell's Ethical Compass framework",
    decision=string("The decision to evaluate", required=True),
    compass_point=string("Specific compass point to focus on", enum=COMPASS_POINTS),
    community_context=string("Relevant community context", required=True),
)
async def ethical_compass_check(args: dict) -> str:
    points = [args["compass_point"]] if args.get("compass_point") else COMPASS_POINTS
    return (
        f'Decision "{args["decision"]}" queued for ethical compass review.\n'
        f"Compass points: {', '.join(points)}\n"
        f"Community context: {args['community_context']}"
    )


@registry.tool(
    "pasifika_framework_alignment",
    "Check alignment with Pasifika frameworks (Tafatolu, Fa'afaletui)",
    proposal=string("Proposal or approach to evaluate", required=True),
    framework=string("Which framework(s) to apply", required=True, enum=["tafatolu", "faafaletui", "both"]),
    wellbeing_dimensions=array("Relevant wellbeing dimensions"),
)
async def pasifika_framework_alignment(args: dict) -> str:
    frameworks = ["tafatolu", "faafaletui"] if args["framework"] == "both" else [args["framework"]]
    return (
        f'Proposal "{args["proposal"]}" recorded for alignment review.\n'
        f"Frameworks: {', '.join(frameworks)}\n"
        f"Wellbeing dimensions: {_listing(args.get('wellbeing_dimensions'))}"
    )


@registry.tool(
    "cultural_risk_assessment",
    "Assess cultural risks and provide mitigation strategies",
    activity=string("Activity or process to assess", required=True),
    risk_categories=array("Categories of risk to evaluate"),
    mitigation_required=boolean("Whether mitigation strategies are needed", default=True),
)
async def cultural_risk_assessment(args: dict) -> str:
    return (
        f'Risk assessment opened for "{args["activity"]}".\n'
        f"Risk categories: {_listing(args.get('risk_categories'), 'all')}\n"
        f"Mitigation strategies requested: {'Yes' if args['mitigation_required'] else 'No'}"
    )


@registry.tool(
    "generate_reflexivity_prompt",
    "Generate culturally-informed reflexivity questions for weekly practice",
    day=string("Day of reflexivity cycle", required=True, enum=["tuesday", "wednesday", "friday"]),
    phase=string("Current project phase", required=True),
    recent_activities=array("Recent project activities"),
)
async def generate_reflexivity_prompt(args: dict) -> str:
    lines = [f"Reflexivity prompt for {args['day'].capitalize()} ({args['phase']} phase):"]
    for activity in args.get("recent_activities") or []:
        lines.append(f"- How did {activity} honour the people who took part?")
    lines.append("- Whose voice has been missing from this week's work?")
    return "\n".join(lines)


@registry.tool(
    "reciprocity_tracker",
    "Track and suggest reciprocity measures for community engagement",
    engagement_type=string("Type of community engagement", required=True),
    participants=array("Participants involved"),
    value_extracted=string("Value/knowledge gained from community", required=True),
    reciprocity_preferences=array("Community preferred forms of reciprocity"),
)
async def reciprocity_tracker(args: dict) -> str:
    return (
        f"Reciprocity noted for {args['engagement_type']}.\n"
        f"Participants: {_listing(args.get('participants'))}\n"
        f"Value received: {args['value_extracted']}\n"
        f"Preferred reciprocity: {_listing(args.get('reciprocity_preferences'), 'ask the community')}"
    )


@registry.resource("tikanga://protocols", "Tikanga Māori Protocols", "Complete tikanga protocols for True Review project")
def tikanga_protocols() -> dict:
    return TIKANGA_PROTOCOLS


@registry.resource("compass://ethical-framework", "Kiri Dell Ethical Compass", "Ethical compass points and cultural lenses")
def ethical_framework() -> dict:
    return ETHICAL_COMPASS


@registry.resource("pasifika://frameworks", "Pasifika Cultural Frameworks", "Tafatolu and Fa'afaletui frameworks")
def pasifika_frameworks() -> dict:
    return PASIFIKA_FRAMEWORKS
