"""
Device health monitoring.

The monitoring service polls each device through a reachability probe,
keeps its health record current and raises alerts from a small rule set.
"""

from .notify import Notifier
from .probe import PingProbe, ReachabilityProbe, SimulatedProbe, create_probe
from .rules import AlertRuleSet, HealthObservation, default_rules, evaluate_rule
from .service import MonitoringService

__all__ = [
    "AlertRuleSet",
    "HealthObservation",
    "MonitoringService",
    "Notifier",
    "PingProbe",
    "ReachabilityProbe",
    "SimulatedProbe",
    "create_probe",
    "default_rules",
    "evaluate_rule",
]
