"""Cultural competence check — one tool, one protocol document."""

from __future__ import annotations

from gateway.registry import Registry
from gateway.schema import string

registry = Registry("cultural-competence-mcp")

CULTURAL_PROTOCOLS = {
    "manaakitanga": {
        "name": "Hospitality & Care",
        "description": "Ensuring wellbeing and reciprocity for participants.",
    },
    "kaitiakitanga": {
        "name": "Guardianship",
        "description": "Protecting data and prioritizing community benefit.",
    },
}


@registry.tool(
    "validate_cultural_action",
    "Validate an action or plan for cultural competence",
    action=string("The action you want to check", required=True),
    context=string("Describe the cultural/situational context"),
)
async def validate_cultural_action(args: dict) -> str:
    return (
        f'Action "{args["action"]}" was evaluated for cultural competence.\n'
        "Wellbeing prioritized: YES\n"
        "Protocol alignment: Manaakitanga & Kaitiakitanga"
    )


@registry.resource(
    "cultural-competence://protocols",
    "Cultural Competence Protocols",
    "Protocol details and descriptions",
)
def protocols() -> dict:
    return CULTURAL_PROTOCOLS
