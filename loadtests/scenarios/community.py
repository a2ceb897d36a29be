"""Community load test scenarios.

Journeys covering event registration under contention and meetup
attendance, including the organizer approval path.
"""

from locust import SequentialTaskSet, task

from loadtests.data_generators import event_data, meetup_data, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import EventState, MeetupState


class EventRegistrationJourney(SequentialTaskSet):
    """Browse events -> schedule a small event -> register members -> cancel one.

    Capacity is kept small so later registrations hit the "Event is full"
    path; those 400s are expected and not counted as failures.
    """

    capacity = 3

    def on_start(self):
        self.state = EventState()

    @task
    def browse_events(self):
        self.client.get("/events", params={"upcoming": "true", "limit": 10}, name="GET /events")

    @task
    def schedule_event(self):
        with self.client.post(
            "/events",
            json=event_data(capacity=self.capacity),
            catch_response=True,
            name="POST /events",
        ) as resp:
            if resp.status_code == 201:
                self.state.event_id = resp.json()["event_id"]
            else:
                resp.failure(f"Schedule event failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def register_members(self):
        for _ in range(self.capacity + 1):
            user_id = shopper_id()
            with self.client.post(
                f"/events/{self.state.event_id}/register",
                json={"user_id": user_id},
                catch_response=True,
                name="POST /events/{id}/register",
            ) as resp:
                if resp.status_code == 200:
                    self.state.registered_user_ids.append(user_id)
                elif resp.status_code == 400:
                    resp.success()
                else:
                    resp.failure(f"Register failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def cancel_registration(self):
        if not self.state.registered_user_ids:
            self.interrupt()
        user_id = self.state.registered_user_ids.pop()
        with self.client.delete(
            f"/events/{self.state.event_id}/register",
            params={"user_id": user_id},
            catch_response=True,
            name="DELETE /events/{id}/register",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel registration failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class MeetupApprovalJourney(SequentialTaskSet):
    """Organize a meetup needing approval -> members ask to join -> organizer approves -> one leaves."""

    def on_start(self):
        self.state = MeetupState(organizer_id=shopper_id())

    @task
    def organize(self):
        with self.client.post(
            "/meetups",
            json=meetup_data(self.state.organizer_id, requires_approval=True),
            catch_response=True,
            name="POST /meetups",
        ) as resp:
            if resp.status_code == 201:
                self.state.meetup_id = resp.json()["meetup_id"]
            else:
                resp.failure(f"Organize meetup failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def request_to_join(self):
        for _ in range(3):
            user_id = shopper_id()
            with self.client.post(
                f"/meetups/{self.state.meetup_id}/join",
                json={"user_id": user_id},
                catch_response=True,
                name="POST /meetups/{id}/join",
            ) as resp:
                if resp.status_code == 200:
                    self.state.pending_user_ids.append(user_id)
                else:
                    resp.failure(f"Join failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def approve(self):
        for user_id in self.state.pending_user_ids:
            with self.client.post(
                f"/meetups/{self.state.meetup_id}/attendees/{user_id}/approve",
                json={"organizer_id": self.state.organizer_id},
                catch_response=True,
                name="POST /meetups/{id}/attendees/{user_id}/approve",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Approve failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def leave(self):
        if self.state.pending_user_ids:
            self.client.delete(
                f"/meetups/{self.state.meetup_id}/join",
                params={"user_id": self.state.pending_user_ids[0]},
                name="DELETE /meetups/{id}/join",
            )
        self.interrupt()
