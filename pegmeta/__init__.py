"""PEG grammar rules: expression trees, span-carrying parsed rules, validation and optimisation passes."""

__version__ = "0.1.0"