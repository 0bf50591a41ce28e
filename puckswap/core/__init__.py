"""
Core calculators, validators and the step engine for the PuckSwap pool.
"""
