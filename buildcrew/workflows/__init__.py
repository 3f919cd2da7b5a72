from .phases import PIPELINE, Phase, PhaseName, RunContext
from .pipeline import Orchestrator


__all__ = ["Orchestrator", "PIPELINE", "Phase", "PhaseName", "RunContext"]
