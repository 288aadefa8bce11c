"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SearchApi(StrEnum):
    SEMANTIC_SCHOLAR = "semantic-scholar"
    OPENALEX = "openalex"


class DiscoveryAction(StrEnum):
    DISCOVER = "discover"
    DECISION_UPDATE = "decision-update"
    RETRY = "retry"


class Decision(StrEnum):
    """Lifecycle state of a discovery candidate."""

    QUEUED = "queued"
    PARSED = "parsed"
    IMPORTED_DRAFT = "imported-draft"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"
    DEFERRED = "deferred"


class ScopeClassification(StrEnum):
    CORE = "in-scope-core"
    ADJACENT = "in-scope-adjacent"
    OUT_OF_SCOPE = "out-of-scope"


class DuplicateMatchType(StrEnum):
    EXACT_DOI = "exact-doi"
    EXACT_S2ID = "exact-s2id"
    EXACT_OPENALEXID = "exact-openalexid"
    FUZZY_TITLE_YEAR = "fuzzy-title-year"


class EntityKind(StrEnum):
    """Audit discriminator for the graph entity a decision applies to."""

    NODE = "node"
    EDGE = "edge"
    REFERENCE = "reference"


class ValidationOutcome(StrEnum):
    ACCEPTED = "accepted"
    SKIPPED_DUPLICATE = "skipped-duplicate"
    REJECTED = "rejected"
    CAP_EXCEEDED = "cap-exceeded"


class ReviewStatus(StrEnum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending-review"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProcessingStatus(StrEnum):
    IMPORTED_DRAFT = "imported-draft"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProvenanceSource(StrEnum):
    HUMAN = "human"
    AGENT = "agent"


class NodeType(StrEnum):
    REGULAR = "regular"
    CHOOSER = "chooser"
    HOLDER = "holder"


class NodeStatus(StrEnum):
    ACTIVE = "active"
    STALE = "stale"
    MERGED = "merged"


class EdgeType(StrEnum):
    IMPLICATION = "implication"
    DERIVATION = "derivation"
    POSSIBILITY = "possibility"

    # Constraint edges (capped daily by governance):
    REQUIRES = "requires"
    CONFOUNDED_BY = "confounded-by"
    INCOMPATIBLE_WITH = "incompatible-with"
    FAILS_WHEN = "fails-when"


CONSTRAINT_EDGE_TYPES: frozenset[EdgeType] = frozenset(
    {
        EdgeType.REQUIRES,
        EdgeType.CONFOUNDED_BY,
        EdgeType.INCOMPATIBLE_WITH,
        EdgeType.FAILS_WHEN,
    }
)

TRUST_AFFECTING_ACTIONS: frozenset[str] = frozenset({"update-trust", "trust-propagation"})
