"""Clients for the optional remote collaborators: score store and hint oracle."""

from .scores import HttpScoreReporter, ScoreEntry, ScoreSummary, build_score_reporter
from .hints import HttpHintOracle, build_hint_oracle
