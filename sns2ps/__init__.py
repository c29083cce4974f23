"""sns2ps - Shoot 'n Score It to PractiScore registration exporter.

This package fetches match, squad and competitor data from the Shoot 'n Score It
API and converts the registration into a CSV file that PractiScore can import.
"""

__version__ = "0.1.0"
