"""
Feature modules for the Hive client.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions
- service.py / evaluator.py: The implementation

Modules communicate through interfaces, not concrete implementations.
"""
