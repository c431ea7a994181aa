"""Domain enumerations for the workflow automation engine.

Enums represent fixed vocabularies: business event triggers, workflow
lifecycle status and the action types a workflow can emit.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class WorkflowTrigger(_ValuesMixin, str, Enum):
    """Kind of business event that can activate workflows."""

    ORDER_CREATED = "ORDER_CREATED"
    PAYIN_RECEIVED = "PAYIN_RECEIVED"
    PAYOUT_REQUESTED = "PAYOUT_REQUESTED"
    KYC_SUBMITTED = "KYC_SUBMITTED"
    USER_REGISTERED = "USER_REGISTERED"
    WALLET_ADDED = "WALLET_ADDED"
    AMOUNT_THRESHOLD = "AMOUNT_THRESHOLD"

    @property
    def entity_type(self) -> str:
        """Business object type that raises this trigger (for audit correlation)."""
        return _TRIGGER_ENTITY[self][0]

    @property
    def entity_id_key(self) -> str:
        """Context key holding the business object id for this trigger."""
        return _TRIGGER_ENTITY[self][1]


_TRIGGER_ENTITY: dict[WorkflowTrigger, tuple[str, str]] = {
    WorkflowTrigger.ORDER_CREATED: ("Order", "orderId"),
    WorkflowTrigger.PAYIN_RECEIVED: ("PayIn", "payInId"),
    WorkflowTrigger.PAYOUT_REQUESTED: ("PayOut", "payOutId"),
    WorkflowTrigger.KYC_SUBMITTED: ("KYC", "kycSessionId"),
    WorkflowTrigger.USER_REGISTERED: ("User", "userId"),
    WorkflowTrigger.WALLET_ADDED: ("Wallet", "walletId"),
    WorkflowTrigger.AMOUNT_THRESHOLD: ("Order", "orderId"),
}


class WorkflowStatus(_ValuesMixin, str, Enum):
    """Workflow lifecycle status. Only ACTIVE workflows are eligible to run."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    ARCHIVED = "ARCHIVED"


class WorkflowActionType(_ValuesMixin, str, Enum):
    """Action a workflow can emit. Executed by downstream action handlers, not the engine."""

    FREEZE_ORDER = "FREEZE_ORDER"
    REJECT_TRANSACTION = "REJECT_TRANSACTION"
    REQUEST_DOCUMENT = "REQUEST_DOCUMENT"
    REQUIRE_APPROVAL = "REQUIRE_APPROVAL"
    SEND_NOTIFICATION = "SEND_NOTIFICATION"
    FLAG_FOR_REVIEW = "FLAG_FOR_REVIEW"
    AUTO_APPROVE = "AUTO_APPROVE"
    ESCALATE_TO_COMPLIANCE = "ESCALATE_TO_COMPLIANCE"


def entity_id_from_context(trigger: str, context: dict) -> str | None:
    """Return the business object id for trigger from context, falling back to context['id'].

    Unknown triggers return context['id'] (or None).
    """
    try:
        key = WorkflowTrigger(trigger).entity_id_key
    except ValueError:
        key = None
    value = (context.get(key) if key else None) or context.get("id")
    return str(value) if value is not None else None


def entity_type_for_trigger(trigger: str) -> str | None:
    """Return the entity type for trigger, or None for triggers outside the vocabulary."""
    try:
        return WorkflowTrigger(trigger).entity_type
    except ValueError:
        return None
