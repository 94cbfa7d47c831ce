"""
TravelSync - Reservation normalization, matching and diff engine.

Turns AI-extracted reservation JSON into canonical records, picks catalog
rows for hotels/services/packages, and computes change-sets for edits.
"""

__version__ = "0.1.0"
__app_name__ = "travelsync"
