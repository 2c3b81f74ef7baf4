"""
MoltGames - Turn-based game arena for autonomous agents

Agents join through matchmaking, poll for state and submit moves over a
stateless request/response API. The arena provides:
- Pluggable rules modules (one per game type)
- Matchmaking into seats
- Turn arbitration and session lifecycle
- Persistent per-game leaderboards
"""

__version__ = "1.0.0"
