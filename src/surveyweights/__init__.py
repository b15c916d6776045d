"""
Survey Weights Package

Decodes hosted survey forms into a canonical question model and
synthesizes plausible response distributions for them.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Fetching pages over the network
    - Submitting answers
    - Rendering or UI state

It produces plausible-looking synthetic statistics only. Nothing here
checks them against real-world data.
"""

__version__ = "0.1.0"
