"""
Ticket references inferred from branch names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


# matches feature/SCRUM-571-description
BRANCH_TICKET_PATTERN = re.compile(r"^(?:feature|hotfix|bugfix|task)/([A-Z]+)-(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class JiraTicketRef:
    prefix: str
    number: str

    @property
    def key(self) -> str:
        return f"{self.prefix}-{self.number}"


def extract_ticket_from_branch(branch: str) -> Optional[JiraTicketRef]:
    """Return the ticket encoded in ``branch``, or ``None``."""
    match = BRANCH_TICKET_PATTERN.match(branch or "")
    if not match:
        return None
    return JiraTicketRef(prefix=match.group(1).upper(), number=match.group(2))
