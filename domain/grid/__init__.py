"""Grid Bounded Context.

Responsible for the in-memory scalar grid and its statistics:
- Value Objects: Grid (mutable, row-major float64 buffer)
- Services: create_default_grid, release_grid, text dumps
- Ports: GridRepository
"""
