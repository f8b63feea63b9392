"""
Status, stagger and sanity bookkeeping driven by clash results.
"""

from .status import (
    AppliedEffect,
    EffectSplit,
    TickResult,
    StaggerTransition,
    SanityTransition,
    apply_immediate_effects,
    tick_scheduled_effects,
    stagger_tier_for,
    update_stagger,
    update_sanity,
    stack_status_effects,
)
