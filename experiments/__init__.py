"""Experiment harness: sweeps, scenarios and plot artifacts built on checkoutsim."""
