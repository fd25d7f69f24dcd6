"""
Core module constants for design efficiency analysis
Extracted magic numbers for better maintainability
"""

# Jacobi Eigenvalue Solver
JACOBI_TOLERANCE = 1e-9  # Stop when the largest off-diagonal magnitude falls below this
JACOBI_MAX_SWEEPS = 100  # One sweep = n(n-1)/2 rotations

# Efficiency Calculation
EFFICIENCY_ZERO_TOLERANCE = 1e-9  # Efficiency factors at or below this are numerical zeros
ROW_SUM_TOLERANCE = 1e-9  # Max |row sum| of a valid information matrix
EFFICIENCY_DISPLAY_PRECISION = 4  # Decimal places shown in summaries

# Mulberry32 PRNG
MULBERRY32_INCREMENT = 0x6D2B79F5
UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296  # 2**32
