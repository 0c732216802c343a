"""
Contract Kernel Integration Tests

Tests covering:
- Contract lifecycle: pre-check -> operation -> post-check
- Decorator wiring and argument bundling
- Registry sharing across threads
- Order-approval reference contracts end to end
"""
