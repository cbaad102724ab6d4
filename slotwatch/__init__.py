"""
Slotwatch - Kill feed victim slot attribution for live matches.

The game client reports kills only against five anonymous victim slots,
and reports enemy heroes only on the minimap. Slotwatch links the two:
- Tracks enemy heroes and their visibility
- Diffs kill counters per victim slot
- Correlates kills with disappearances, with a confidence per mapping
- Reports kills and periodic summaries
"""

__version__ = "0.1.0"
