"""Mixed storefront and community workload scenario.

Combines journeys from both domains with weights that model a print
shop's traffic. This is the recommended scenario for load baseline
testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.community import EventRegistrationJourney, MeetupApprovalJourney
from loadtests.scenarios.storefront import CatalogBrowseJourney, CheckoutJourney, OrderCancellationJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Storefront (75%):
    - Catalog browsing: read-heavy, most common
    - Checkout through payment confirmation
    - Order cancellation: unhappy path

    Community (25%):
    - Event registration under capacity pressure
    - Meetup join with organizer approval

    Hits both databases at once, testing the domain context middleware's
    routing under load.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CatalogBrowseJourney: 10,
        CheckoutJourney: 6,
        OrderCancellationJourney: 2,
        EventRegistrationJourney: 4,
        MeetupApprovalJourney: 2,
    }


class CheckoutUser(HttpUser):
    """Checkout-only load; stresses stock reservation and payment confirmation."""

    wait_time = between(0.2, 1.0)
    tasks = [CheckoutJourney]
