"""
GenZ Finance Manager - Source Package

A personal finance tracker: record income and expenses, see a dashboard
summary, browse category reports, adjust a few app settings.

DESIGN PRINCIPLES:
1. Every figure is derived from the transaction list, never stored
2. Fail visibly: store errors become a message on screen, not a crash
3. No silent corrections of user input
4. The session owner is passed explicitly, never read from a global
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "GenZ Finance Manager Team"
