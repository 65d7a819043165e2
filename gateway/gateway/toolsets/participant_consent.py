"""Participant consent tools.

Consent events are kept in a bounded audit trail, which is what
``consent://tracking`` shows.  The protocol and withdrawal documents
are the descriptive consent framework; no consent template text has
been supplied, so ``consent://templates`` is empty.
"""

from __future__ import annotations

import logging

from gateway.audit import AuditTrail
from gateway.registry import Registry
from gateway.schema import array, boolean, obj, string

log = logging.getLogger(__name__)

registry = Registry("true-review-participant-consent")

consent_events = AuditTrail("consent_events")

TRAILS = (consent_events,)

CONSENT_TYPES = {
    "informed": "Full disclosure with cultural context",
    "ongoing": "Continuous consent with withdrawal rights",
    "collective": "Community-level consent for group data",
    "cultural": "Cultural authority consent for traditional knowledge",
}

WITHDRAWAL_PROCEDURES = {
    "immediate": "Data use stops immediately",
    "retrospective": "Past use acknowledged, future use stopped",
    "community": "Community-level withdrawal processes",
}

CONSENT_TEMPLATES: dict = {}


@registry.tool(
    "initiate_consent_process",
    "Begin culturally-informed consent process for new participant",
    participantId=string(required=True),
    consentType=string(required=True, enum=list(CONSENT_TYPES)),
    culturalContext=obj(
        iwi=string(),
        culturalAdvisor=string(),
        specialConsiderations=array(),
    ),
)
async def initiate_consent_process(args: dict) -> str:
    await consent_events.record(
        args["participantId"],
        event="initiated",
        consentType=args["consentType"],
        culturalContext=args.get("culturalContext"),
    )
    return f"Consent process initiated for {args['participantId']}, type: {args['consentType']}."


@registry.tool(
    "verify_ongoing_consent",
    "Check and update ongoing consent status",
    participantId=string(required=True),
    checkInType=string(required=True, enum=["weekly", "bi-weekly", "monthly", "milestone"]),
    consentStatus=string(required=True, enum=["maintained", "modified", "withdrawn", "pending"]),
)
async def verify_ongoing_consent(args: dict) -> str:
    await consent_events.record(
        args["participantId"],
        event="verified",
        checkInType=args["checkInType"],
        consentStatus=args["consentStatus"],
    )
    return f"Verified ongoing consent for {args['participantId']} - status: {args['consentStatus']}."


@registry.tool(
    "process_consent_withdrawal",
    "Handle consent withdrawal with cultural protocols",
    participantId=string(required=True),
    withdrawalType=string(
        required=True, enum=["complete", "partial", "data-retention", "cultural-only"]
    ),
    dataHandling=obj(
        deleteExisting=boolean(),
        anonymizeData=boolean(),
        culturalDataProtection=boolean(),
    ),
)
async def process_consent_withdrawal(args: dict) -> str:
    await consent_events.record(
        args["participantId"],
        event="withdrawn",
        withdrawalType=args["withdrawalType"],
        dataHandling=args.get("dataHandling"),
    )
    log.info("consent withdrawal (%s) for %s", args["withdrawalType"], args["participantId"])
    return f"Consent withdrawal ({args['withdrawalType']}) processing for {args['participantId']}."


@registry.tool(
    "validate_cultural_compliance",
    "Validate consent process against cultural protocols",
    participantId=string(required=True),
    validationType=string(
        required=True,
        enum=["tikanga-compliance", "cultural-authority", "collective-impact", "sacred-knowledge"],
    ),
    validatorId=string(required=True),
)
async def validate_cultural_compliance(args: dict) -> str:
    return (
        f"Cultural compliance validated for {args['participantId']}, "
        f"type: {args['validationType']}."
    )


@registry.tool(
    "generate_consent_report",
    "Generate consent compliance and cultural alignment report",
    reportType=string(
        required=True,
        enum=["individual", "collective", "cultural-compliance", "withdrawal-summary"],
    ),
    timeRange=obj(startDate=string(), endDate=string()),
    includeMetadata=boolean(default=False),
)
async def generate_consent_report(args: dict) -> str:
    text = f"Consent report generated: {args['reportType']}."
    if args["includeMetadata"]:
        by_event = await consent_events.count_by("event")
        summary = ", ".join(f"{k}={v}" for k, v in sorted(by_event.items())) or "no events"
        text += f"\nConsent events in current window: {summary}."
    return text


# ── Resources ────────────────────────────────────────────────────────


@registry.resource("consent://templates", "Consent Form Templates", "Culturally-informed consent form templates")
def templates() -> dict:
    return CONSENT_TEMPLATES


@registry.resource("consent://protocols", "Cultural Consent Protocols", "Indigenous methodology consent protocols")
def protocols() -> dict:
    return {"consentTypes": CONSENT_TYPES}


@registry.resource("consent://tracking", "Consent Status Tracking", "Active consent records and status monitoring")
async def tracking() -> dict:
    entries = await consent_events.snapshot()
    return {"records": [e.to_dict() for e in entries], "total": len(entries)}


@registry.resource("consent://withdrawal", "Withdrawal Procedures", "Cultural and legal withdrawal processes")
def withdrawal() -> dict:
    return WITHDRAWAL_PROCEDURES
