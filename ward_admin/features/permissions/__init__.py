"""
Permission management feature module.

Role → module → {view, add, edit, delete} grid, the resolver that turns it
into an effective permission view per user, and the record ownership gate.
"""
