# Domain Layer
# ============
# Value objects, typed errors and pure functions (sampling, insights).
# Nothing in here performs I/O.
