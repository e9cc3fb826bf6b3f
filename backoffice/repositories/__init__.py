"""
Persistence adapters.

Record stores encapsulate where an entity's array lives (JSON file, SQL table
or memory); repositories hold the validation and query rules on top of them.
"""
