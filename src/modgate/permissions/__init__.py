"""
Decoding of Discord permission bitmasks.

- **permission_evaluator.py**: Parses the decimal bitmask string Discord sends,
  answers capability checks (administrator grants everything) and names the
  granted permissions.
"""
