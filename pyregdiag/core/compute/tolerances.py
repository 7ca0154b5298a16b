"""
Numeric tolerances.

QR_RANK_TOL mirrors the tolerance R's lm.fit passes to LINPACK dqrdc2:
a column is aliased when the norm of its residual after projecting out the
columns already kept falls below tol times the column's own norm.
"""


QR_RANK_TOL = 1e-7

# Residuals with |r| below this count as zero (interpolated points) in
# quantile regression, as in quantreg::summary.rq.
ZERO_RESIDUAL_EPS = float(2.220446049250313e-16 ** (2.0 / 3.0))
