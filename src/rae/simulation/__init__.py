from .replay import ReplayHarness, ReplayRun, SimulationSummary, simulate

__all__ = ["ReplayHarness", "ReplayRun", "SimulationSummary", "simulate"]
