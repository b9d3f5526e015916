"""
Services: pure helpers (geo, deal schedule, areas, filters) and stateful pieces
(restaurant cache store, offline manager, view history).

Kept import-light so core modules can depend on services.types without cycles.
"""
