"""
Domain Layer

Cart entities, value objects, repository contracts and the pure cart logic.
"""
