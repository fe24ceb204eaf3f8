"""Discrete-time simulation of least-loaded print job dispatch across a printer pool."""

__version__ = "0.1.0"
