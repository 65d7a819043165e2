"""AI-safety monitoring tools.

Served tool-call style (``{operation, arguments}``) at ``/api/ai-safety``.
Every tool answers with canned text and records the request in a
bounded audit trail; ``audit_protection_effectiveness`` reports on
those trails.  The taxonomy below is descriptive data quoted back to
the caller, not a classifier.
"""

from __future__ import annotations

import logging

from gateway.audit import AuditTrail
from gateway.registry import Registry
from gateway.schema import array, boolean, obj, string

log = logging.getLogger(__name__)

registry = Registry("true-review-ai-safety")

scraping_attempts = AuditTrail("scraping_attempts")
content_classifications = AuditTrail("content_classifications")
terms_validations = AuditTrail("terms_validations")
cultural_decisions = AuditTrail("cultural_decisions")
poisoning_deployments = AuditTrail("poisoning_deployments")

TRAILS = (
    scraping_attempts,
    content_classifications,
    terms_validations,
    cultural_decisions,
    poisoning_deployments,
)

CULTURAL_TAXONOMY = {
    "tapu": {
        "description": "Sacred content requiring maximum protection",
        "indicators": ["whakapapa", "karakia", "pūrākau", "moko kauae", "ceremonial imagery"],
        "protections": ["offline-only", "poisoning", "community-gated", "explicit-consent"],
        "aiAccess": "prohibited",
    },
    "noa": {
        "description": "Common content suitable for controlled sharing",
        "indicators": ["general artwork", "landscape", "contemporary interpretations"],
        "protections": ["watermarking", "low-quality", "poisoning-optional"],
        "aiAccess": "controlled",
    },
    "whakapapa": {
        "description": "Genealogical/relational content requiring special handling",
        "indicators": ["family connections", "tribal relationships", "ancestral links"],
        "protections": ["community-consent", "offline-preferred", "explicit-approval"],
        "aiAccess": "community-controlled",
    },
}

POISONING_TOOLS = {
    "nightshade": {
        "name": "Nightshade",
        "purpose": "Corrupt AI training data",
        "effectiveness": "high",
        "applicability": ["images", "visual-art", "photography"],
    },
    "glaze": {
        "name": "Glaze",
        "purpose": "Protect artistic style from mimicry",
        "effectiveness": "medium-high",
        "applicability": ["digital-art", "traditional-art", "design-work"],
    },
}


def _yes_no(flag: bool | None) -> str:
    return "Yes" if flag else "No"


# ── Tools ────────────────────────────────────────────────────────────


@registry.tool(
    "monitor_ai_scraping",
    "Detect and log potential AI scraping attempts on True Review content",
    request_source=string("Source IP or identifier of request", required=True),
    request_pattern=string("Pattern of requests detected", required=True),
    content_accessed=string("Type of content being accessed"),
    user_agent=string("User agent string from request"),
)
async def monitor_ai_scraping(args: dict) -> str:
    source = args["request_source"]
    await scraping_attempts.record(
        source,
        pattern=args["request_pattern"],
        content=args.get("content_accessed"),
        userAgent=args.get("user_agent"),
    )
    total = len([e for e in await scraping_attempts.snapshot() if e.key == source])
    log.info("scraping attempt logged from %s", source)
    return (
        f'Scraping attempt from "{source}" logged.\n'
        f"Pattern: {args['request_pattern']}\n"
        f"Content accessed: {args.get('content_accessed') or 'unspecified'}\n"
        f"User agent: {args.get('user_agent') or 'unknown'}\n"
        f"Attempts from this source in the current window: {total}"
    )


@registry.tool(
    "classify_cultural_content",
    "Classify content as tapu/noa using Dr. Karatiana's framework",
    content_id=string("Unique identifier for content", required=True),
    content_type=string(required=True, enum=["image", "text", "audio", "video", "mixed"]),
    content_description=string("Description of cultural content", required=True),
    cultural_indicators=array("Cultural elements present"),
    community_source=string("Community or iwi of origin"),
    proposed_classification=string(enum=["tapu", "noa", "whakapapa", "uncertain"]),
)
async def classify_cultural_content(args: dict) -> str:
    classification = args.get("proposed_classification") or "uncertain"
    await content_classifications.record(
        args["content_id"],
        contentType=args["content_type"],
        classification=classification,
        communitySource=args.get("community_source"),
        indicators=args.get("cultural_indicators", []),
    )

    lines = [
        f'Content "{args["content_id"]}" ({args["content_type"]}) recorded for classification.',
        f"Description: {args['content_description']}",
        f"Community source: {args.get('community_source') or 'not stated'}",
    ]
    category = CULTURAL_TAXONOMY.get(classification)
    if category is None:
        lines.append("Classification: uncertain. Refer to the community for a tapu/noa decision.")
    else:
        lines += [
            f"Proposed classification: {classification} ({category['description']})",
            f"Listed protections: {', '.join(category['protections'])}",
            f"AI access: {category['aiAccess']}",
        ]
    return "\n".join(lines)


@registry.tool(
    "implement_poisoning_protection",
    "Apply Nightshade/Glaze protection to cultural content",
    content_id=string("Content to protect", required=True),
    protection_type=string(required=True, enum=["nightshade", "glaze", "both"]),
    protection_level=string(enum=["light", "medium", "maximum"]),
    cultural_classification=string(required=True, enum=["tapu", "noa", "whakapapa"]),
    community_approval=boolean("Community has approved protection"),
)
async def implement_poisoning_protection(args: dict) -> str:
    kind = args["protection_type"]
    tools = ["nightshade", "glaze"] if kind == "both" else [kind]
    level = args.get("protection_level") or "medium"
    await poisoning_deployments.record(
        args["content_id"],
        tools=tools,
        level=level,
        classification=args["cultural_classification"],
        communityApproval=bool(args.get("community_approval")),
    )
    applied = "; ".join(f"{POISONING_TOOLS[t]['name']}: {POISONING_TOOLS[t]['purpose']}" for t in tools)
    return (
        f'Protection requested for "{args["content_id"]}" '
        f"({args['cultural_classification']}), level {level}.\n"
        f"Tools: {applied}\n"
        f"Community approval recorded: {_yes_no(args.get('community_approval'))}"
    )


@registry.tool(
    "validate_terms_compliance",
    "Check platform terms of service for AI training clauses",
    platform_name=string("Name of platform/service", required=True),
    terms_url=string("URL to terms of service"),
    content_type=string("Type of content being uploaded"),
    check_ai_training=boolean("Check for AI training permissions", default=True),
    check_ip_ownership=boolean("Check intellectual property clauses", default=True),
)
async def validate_terms_compliance(args: dict) -> str:
    platform = args["platform_name"]
    await terms_validations.record(
        platform,
        termsUrl=args.get("terms_url"),
        contentType=args.get("content_type"),
    )
    return (
        f'Terms review recorded for "{platform}".\n'
        f"Terms URL: {args.get('terms_url') or 'not provided'}\n"
        f"AI training clauses checked: {_yes_no(args['check_ai_training'])}\n"
        f"IP ownership clauses checked: {_yes_no(args['check_ip_ownership'])}\n"
        "Manual review of the current terms is required before upload."
    )


@registry.tool(
    "manage_tapu_noa_decisions",
    "Record and track community decisions about tapu/noa content sharing",
    decision_id=string("Unique identifier for decision", required=True),
    content_id=string("Content being decided upon", required=True),
    community_consulted=array("Communities/iwi consulted", required=True),
    decision_makers=array("Individuals involved in decision"),
    decision_rationale=string("Reasoning behind classification"),
    final_classification=string(required=True, enum=["tapu", "noa", "whakapapa", "restricted"]),
    sharing_permissions=obj(
        online_sharing=boolean(),
        ai_training=boolean(),
        commercial_use=boolean(),
        academic_use=boolean(),
    ),
)
async def manage_tapu_noa_decisions(args: dict) -> str:
    permissions = args.get("sharing_permissions") or {}
    await cultural_decisions.record(
        args["decision_id"],
        contentId=args["content_id"],
        classification=args["final_classification"],
        consulted=args["community_consulted"],
        permissions=permissions,
    )
    granted = [name for name, allowed in permissions.items() if allowed] or ["none"]
    return (
        f'Decision "{args["decision_id"]}" recorded for content "{args["content_id"]}".\n'
        f"Final classification: {args['final_classification']}\n"
        f"Communities consulted: {', '.join(args['community_consulted']) or 'none listed'}\n"
        f"Permissions granted: {', '.join(granted)}"
    )


@registry.tool(
    "audit_protection_effectiveness",
    "Assess effectiveness of implemented AI protection measures",
    audit_period=string('Time period for audit (e.g., "last-30-days")'),
    content_categories=array("Categories to audit"),
    protection_types=array("Protection methods to assess"),
    include_cultural_assessment=boolean("Include cultural supervision review", default=True),
)
async def audit_protection_effectiveness(args: dict) -> str:
    lines = [f"Protection audit for period: {args.get('audit_period') or 'current window'}"]
    for trail in TRAILS:
        lines.append(f"{trail.name}: {await trail.count()}")
    by_class = await content_classifications.count_by("classification")
    if by_class:
        lines.append(
            "Classifications: " + ", ".join(f"{k}={v}" for k, v in sorted(by_class.items()))
        )
    if args.get("content_categories"):
        lines.append(f"Categories in scope: {', '.join(args['content_categories'])}")
    if args.get("protection_types"):
        lines.append(f"Protection types in scope: {', '.join(args['protection_types'])}")
    lines.append(
        f"Cultural supervision review included: {_yes_no(args['include_cultural_assessment'])}"
    )
    return "\n".join(lines)
