"""Game domain services: deck, clock, scheduler and the match engine.

This package holds the round state machine and everything it needs,
keeping Socket.IO and HTTP concerns out of the core game mechanics.
Import the submodules directly (``from cardflip.services.games.engine
import MatchEngine``).
"""
