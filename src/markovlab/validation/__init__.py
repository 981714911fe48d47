"""Statistical checks on observed trajectories."""

from .markov_property import MarkovPropertyResult, check_markov_property, history_error

__all__ = ["MarkovPropertyResult", "check_markov_property", "history_error"]
