"""
PMR Ratings - padel player rating service.

Computes and tracks each player's PMR (Player Match Rating, 0.1 to 8.9)
and its reliability (0 to 100) across rated doubles matches.

Main components:
- rating: post-match PMR / reliability adjustment engine
- score: set score validation and parsing
- onboarding: starting PMR estimate from the signup questionnaire
- db: persisted player ratings and parameter sets
- web: FastAPI JSON API used by the admin console
"""

__version__ = "1.0.0"
