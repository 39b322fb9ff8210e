"""Application layer: DTOs, interfaces, services, and use cases.

Depends only on domain and protocol definitions. Infrastructure
implements the interfaces (repositories, resolver, outbox).
"""
