"""
data.py — Seed fixtures and bootstrap for the campus services tracker
=====================================================================
There is no database. At start-up we build one UserDirectory and one
RequestStore, fill them from the fixtures below and hand them around
together as a CampusState.
"""

from dataclasses import dataclass, field
from datetime import date

from .directory import UserDirectory
from .schema import ServiceRequest, UserProfile
from .store import RequestStore

# ── User profiles ─────────────────────────────────────────────────────────────

SEED_USERS: list[UserProfile] = [
    UserProfile(
        id="s1",
        name="Rahul Sharma",
        email="rahul.s@college.edu",
        role="student",
        enrollment_number="CS2023001",
        department="Computer Science",
        avatar_url="https://images.unsplash.com/photo-1535713875002-d1d0cf377fde?auto=format&fit=crop&q=80&w=100",
    ),
    UserProfile(
        id="st1",
        name="Prof. Anjali Gupta",
        email="anjali.g@college.edu",
        role="staff",
        avatar_url="https://images.unsplash.com/photo-1494790108377-be9c29b29330?auto=format&fit=crop&q=80&w=100",
    ),
    UserProfile(
        id="a1",
        name="System Admin",
        email="admin@college.edu",
        role="admin",
        avatar_url="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?auto=format&fit=crop&q=80&w=100",
    ),
]

# ── Existing requests ─────────────────────────────────────────────────────────
# Newest first. s2 has no profile; requests only keep a snapshot of the name.

SEED_REQUESTS: list[ServiceRequest] = [
    ServiceRequest(
        id="req1",
        student_id="s1",
        student_name="Rahul Sharma",
        service_type="Drinking Water Issue",
        location="Block A, 2nd Floor",
        description="Water cooler is leaking.",
        status="Submitted",
        date=date(2023, 10, 25),
    ),
    ServiceRequest(
        id="req2",
        student_id="s2",
        student_name="Priya Patel",
        service_type="Cleanliness in Classroom",
        location="Room 304",
        description="Dustbins are full.",
        status="In Progress",
        date=date(2023, 10, 24),
    ),
    ServiceRequest(
        id="req3",
        student_id="s1",
        student_name="Rahul Sharma",
        service_type="ID Card Issue",
        description="Lost my ID card, need replacement.",
        status="Resolved",
        date=date(2023, 10, 20),
        remarks="Collect from Admin block",
    ),
]


@dataclass
class CampusState:
    """Everything the tool layer needs, constructed once per process."""

    directory: UserDirectory = field(default_factory=UserDirectory)
    store: RequestStore = field(default_factory=RequestStore)


def bootstrap(seed: bool = True) -> CampusState:
    state = CampusState()
    if seed:
        state.directory.load(SEED_USERS)
        state.store.load(SEED_REQUESTS)
    return state
