"""
Type definitions for HookGate.

This module contains the webhook event enumeration and the header
names used by the GitHub delivery convention.
"""

from enum import Enum

# GitHub delivery headers
SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_256_HEADER = "X-Hub-Signature-256"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"

# Used when a request declares no Content-Type
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class EventKind(str, Enum):
    """
    Webhook event categories, valued by their canonical delivery name.

    WILDCARD is not an event GitHub delivers: inside an allowed-event
    set it means "any concrete event kind".
    """

    WILDCARD = "*"

    CHECK_RUN = "check_run"
    CHECK_SUITE = "check_suite"
    CODE_SCANNING_ALERT = "code_scanning_alert"
    COMMIT_COMMENT = "commit_comment"
    CONTENT_REFERENCE = "content_reference"
    CREATE = "create"
    DELETE = "delete"
    DEPLOY_KEY = "deploy_key"
    DEPLOYMENT = "deployment"
    DEPLOYMENT_STATUS = "deployment_status"
    DISCUSSION = "discussion"
    DISCUSSION_COMMENT = "discussion_comment"
    DOWNLOAD = "download"
    FOLLOW = "follow"
    FORK = "fork"
    FORK_APPLY = "fork_apply"
    GITHUB_APP_AUTHORIZATION = "github_app_authorization"
    GIST = "gist"
    GOLLUM = "gollum"
    INSTALLATION = "installation"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    ISSUE_COMMENT = "issue_comment"
    ISSUES = "issues"
    LABEL = "label"
    MARKETPLACE_PURCHASE = "marketplace_purchase"
    MEMBER = "member"
    MEMBERSHIP = "membership"
    META = "meta"
    MILESTONE = "milestone"
    ORG_BLOCK = "org_block"
    ORGANIZATION = "organization"
    PACKAGE = "package"
    PAGE_BUILD = "page_build"
    PING = "ping"
    PROJECT = "project"
    PROJECT_CARD = "project_card"
    PROJECT_COLUMN = "project_column"
    PUBLIC = "public"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PUSH = "push"
    REGISTRY_PACKAGE = "registry_package"
    RELEASE = "release"
    REPOSITORY = "repository"
    REPOSITORY_DISPATCH = "repository_dispatch"
    REPOSITORY_IMPORT = "repository_import"
    REPOSITORY_VULNERABILITY_ALERT = "repository_vulnerability_alert"
    SECRET_SCANNING_ALERT = "secret_scanning_alert"
    SECURITY_ADVISORY = "security_advisory"
    SPONSORSHIP = "sponsorship"
    STAR = "star"
    STATUS = "status"
    TEAM = "team"
    TEAM_ADD = "team_add"
    WATCH = "watch"
    WORKFLOW_DISPATCH = "workflow_dispatch"
    WORKFLOW_JOB = "workflow_job"
    WORKFLOW_RUN = "workflow_run"

    @classmethod
    def from_name(cls, name: str) -> "EventKind":
        """
        Resolve a concrete event kind from its canonical delivery name.

        The lookup is exact (case-sensitive) and never yields WILDCARD.

        Raises:
            ValueError: If the name is not a known concrete event
        """
        kind = _CONCRETE_BY_NAME.get(name)
        if kind is None:
            raise ValueError(f"Unknown webhook event: {name!r}")
        return kind

    @property
    def is_wildcard(self) -> bool:
        return self is EventKind.WILDCARD

    @classmethod
    def concrete(cls) -> tuple["EventKind", ...]:
        """All event kinds except WILDCARD, in declaration order."""
        return tuple(_CONCRETE_BY_NAME.values())


_CONCRETE_BY_NAME: dict[str, EventKind] = {
    kind.value: kind for kind in EventKind if kind is not EventKind.WILDCARD
}
