"""
SignalDesk: AI consensus trading signals for a forex dashboard.

Application package root. This is a small service using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - signals: Multi-provider signal generation, signal history, market data.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (DB, AI provider APIs) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
