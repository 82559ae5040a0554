"""Restricted SCF building blocks: operators, Fock builders, AO matrices, guesses and the SCF loop."""

__version__ = "1.0.0"