"""
Reconciliation module for the CSV reconciliation system.

The engine reconciles one file pair; the manager orchestrates a run.
"""
