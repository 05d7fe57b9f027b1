"""
Split Wizard - Source Package

The core of the "new transaction" flow: a three-stage wizard that records
a shared expense and works out how much each participant owes.

DESIGN PRINCIPLES:
1. User input is coerced or clamped, never rejected with an exception
2. Caller bugs fail loudly (contract violations raise)
3. Derived values are recomputed from state on every read
4. People and groups are referenced by id only
5. Persistence and the people directory are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "Split Wizard Team"
