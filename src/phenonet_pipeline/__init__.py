"""Phenotype-weighted protein interaction network prioritisation pipeline."""

__version__ = "0.1.0"
