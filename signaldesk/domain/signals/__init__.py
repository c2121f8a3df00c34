"""
Signals bounded context, domain layer.

- Consensus aggregation of AI provider opinions
- Provider reply parsing
- Signal validity windows
- Synthetic market data and forex sessions
"""
