"""Application services.

Services implement the release flow, coordinating between the core layer
(core/) and the git and gh adapters (git/, services/release/gh.py).
"""
