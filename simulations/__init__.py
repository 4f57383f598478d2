# simulations/__init__.py
"""
Monte Carlo experiments on synthetic cohorts for the mmpa package.

Run comparisons via:
    python -m simulations.compare --n 300 --prevalence 0.1 --pool-size 5 --perms 200
"""
