"""
Scheduling core: recurrence expansion, visibility rules, participant
state machine and the exception taxonomy.

Nothing in this package performs I/O directly; collaborators are reached
through the protocols in ``training_backend.core.interfaces``.
"""
