"""
Dofus almanax aggregator.

Fetches the upcoming daily almanax bonuses from the dofusdu.de Dofus 3 API,
validates them, and enriches each day with the best available item image
(Dofus 2 API first, then the Dofus 3 hd and sd images).
"""

__version__ = "0.1.0"
