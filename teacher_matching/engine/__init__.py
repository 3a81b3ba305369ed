"""Matching and audit engine.

Sub-modules:
- auto_assignment   – greedy student → teacher assignment under a load cap
- team_composition  – roster distributions & Shannon diversity score
- recommendations   – team composition suggestions
- team_analysis     – composition + diversity + recommendations in one call
- fairness          – disparity / ABROCA / distribution balance audit
"""
