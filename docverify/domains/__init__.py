"""
Domains - Business logic layer.

Each domain is self-contained with:
- contracts.py: Interfaces (Protocol classes)
- models.py: Pydantic data models
- Implementation files
- test_*.py beside the code
"""

__all__ = [
    "extraction",
    "validation",
    "orchestration",
]
