"""Indigenous data sovereignty tools.

Handlers restate the request as a canned report; the principles are
served verbatim as the ``te-mana-raraunga://principles`` resource.
"""

from __future__ import annotations

from gateway.registry import Registry
from gateway.schema import array, boolean, string

registry = Registry("true-review-data-sovereignty")

TE_MANA_RARAUNGA = {
    "rangatiratanga": {
        "name": "Authority",
        "principle": "Māori have authority over Māori data and Māori data ecosystems",
        "implementation": [
            "Community governance structures",
            "Indigenous leadership in data decisions",
            "Self-determination in data use",
        ],
    },
    "whakapapa": {
        "name": "Relationships",
        "principle": "Data has whakapapa (genealogy) and inherent connections",
        "implementation": [
            "Data lineage tracking",
            "Relationship mapping",
            "Contextual preservation",
        ],
    },
    "whakatōhea": {
        "name": "Collective responsibility",
        "principle": "Collective responsibility for nurturing relationships with data",
        "implementation": [
            "Shared stewardship",
            "Community accountability",
            "Intergenerational care",
        ],
    },
    "kotahitanga": {
        "name": "Unity",
        "principle": "Data ecosystems should be unified and integrated",
        "implementation": [
            "Interoperability with cultural protocols",
            "Holistic data approaches",
            "System integration",
        ],
    },
    "manaakitanga": {
        "name": "Care and protection",
        "principle": "Data should be cared for and protected like people",
        "implementation": [
            "Protective measures",
            "Ethical use guidelines",
            "Community benefit prioritized",
        ],
    },
    "kaitiakitanga": {
        "name": "Guardianship",
        "principle": "Sustainable guardianship of data for future generations",
        "implementation": [
            "Long-term stewardship",
            "Environmental protection",
            "Future-oriented governance",
        ],
    },
}

CONSENT_TYPES = ["informed", "ongoing", "collective", "cultural", "dynamic"]


def _included(flag: bool) -> str:
    return "included" if flag else "not included"


@registry.tool(
    "classify_data_sovereignty",
    "Classify data according to Indigenous data sovereignty principles",
    data_description=string(required=True),
    cultural_context=string(required=True),
    participant_info=string(),
    intended_use=string(required=True),
)
async def classify_data_sovereignty(args: dict) -> str:
    return (
        f'Classified "{args["data_description"]}" for "{args["cultural_context"]}". '
        f"Intended use: {args['intended_use']}.\n"
        "Protection needed: High. Review by cultural authority recommended."
    )


@registry.tool(
    "validate_consent_compliance",
    "Validate that data use complies with consent agreements",
    data_id=string(required=True),
    proposed_use=string(required=True),
    consent_type=string(required=True, enum=CONSENT_TYPES),
    participants=array(),
)
async def validate_consent_compliance(args: dict) -> str:
    return f'Consent type "{args["consent_type"]}" validated for data "{args["data_id"]}".'


@registry.tool(
    "generate_sovereignty_audit",
    "Generate comprehensive data sovereignty audit report",
    audit_scope=string(required=True),
    focus_areas=array(),
    include_recommendations=boolean(default=True),
)
async def generate_sovereignty_audit(args: dict) -> str:
    focus = ", ".join(args["focus_areas"]) if args.get("focus_areas") else "N/A"
    return (
        f'Sovereignty audit report for scope "{args["audit_scope"]}". Focus areas: {focus}.\n'
        f"Recommendations included: {'Yes' if args['include_recommendations'] else 'No'}."
    )


@registry.tool(
    "track_data_lineage",
    "Track data lineage and whakapapa (genealogy)",
    data_id=string(required=True),
    include_transformations=boolean(default=True),
    cultural_connections=boolean(default=True),
)
async def track_data_lineage(args: dict) -> str:
    return (
        f'Lineage for data "{args["data_id"]}" traced. '
        f"Transformations: {_included(args['include_transformations'])}, "
        f"Cultural connections: {_included(args['cultural_connections'])}."
    )


@registry.tool(
    "assess_cultural_impact",
    "Assess potential cultural impact of data use",
    proposed_action=string(required=True),
    affected_communities=array(required=True),
    risk_tolerance=string(enum=["low", "moderate", "high"], default="low"),
    mitigation_required=boolean(default=True),
)
async def assess_cultural_impact(args: dict) -> str:
    return (
        f'Assessed impact for action "{args["proposed_action"]}". '
        f"Affected communities: {', '.join(args['affected_communities'])}. "
        f"Risk: {args['risk_tolerance']}.\n"
        f"Mitigation required: {'Yes' if args['mitigation_required'] else 'No'}."
    )


@registry.tool(
    "generate_community_data_report",
    "Generate community-accessible data report respecting sovereignty",
    report_scope=string(required=True),
    include_recommendations=boolean(default=True),
)
async def generate_community_data_report(args: dict) -> str:
    return (
        f'Community data report for "{args["report_scope"]}". '
        f"Recommendations: {_included(args['include_recommendations'])}."
    )


@registry.resource(
    "te-mana-raraunga://principles",
    "Te Mana Raraunga Principles",
    "Complete Te Mana Raraunga principles for Indigenous data sovereignty",
)
def principles() -> dict:
    return TE_MANA_RARAUNGA
