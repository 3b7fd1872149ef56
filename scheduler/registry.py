"""
Policy factory — maps policy names to policy classes.

This is the Factory pattern: instead of writing if/elif chains everywhere,
there is ONE place that knows how to create policies.

Adding a new policy = create the class, add one line to this registry.
"""

from models.enums import SchedulingPolicy
from scheduler.base import AbstractPolicy
from scheduler.rms import RMSPolicy
from scheduler.edf import EDFPolicy
from scheduler.dms import DMSPolicy
from scheduler.lst import LSTPolicy


_REGISTRY: dict[SchedulingPolicy, type[AbstractPolicy]] = {
    SchedulingPolicy.RMS: RMSPolicy,
    SchedulingPolicy.EDF: EDFPolicy,
    SchedulingPolicy.DMS: DMSPolicy,
    SchedulingPolicy.LST: LSTPolicy,
}


def create_policy(policy: SchedulingPolicy | str) -> AbstractPolicy:
    """
    Create a fresh policy instance.

    Accepts the enum or its string value ("rms", "edf", ...). Every run gets
    its own instance, since a policy holds the task set it was bound to.
    """
    try:
        policy = SchedulingPolicy(policy)
    except ValueError:
        raise ValueError(
            f"Unknown scheduling policy: '{policy}'. "
            f"Available: {[p.value for p in SchedulingPolicy]}"
        ) from None

    return _REGISTRY[policy]()
