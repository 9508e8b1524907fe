"""
Foldscan - Mobile product page fold scanner

Loads an e-commerce product page in a locked mobile viewport and reports
four above-the-fold signals: review evidence, price visibility, shipping
mentions, and blocking modal/overlay presence.
"""

__version__ = "0.1.0"
__author__ = "Foldscan Team"
