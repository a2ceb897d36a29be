"""Community bounded context: ticketed events and member-run meetups.

Both aggregates hold a capacity-limited set of participants. Joining and
leaving run as commands so that the capacity check and the write happen in
the same unit of work.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

community = Domain(name="community")

logger = structlog.get_logger(__name__)
