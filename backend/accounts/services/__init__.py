"""Services Layer — imperative shell around the pure core rules.

Invariants:
    - Services receive their collaborators (repository, hasher) by injection
    - Services raise AccountsError subclasses only; transport mapping happens in api/

Design Decisions:
    - One service per aggregate (UserLifecycleService for User)
"""
