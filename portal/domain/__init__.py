"""Domain layer: entities, enums, permissions, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""
