#!/usr/bin/env python3

"""
Test suite for tuni.

Unit tests covering:
- Transcript signatures and their ordering
- GTF/GFF line parsing and signature accumulation
- Cross-sample unification and label assignment
- Output rewriting in GTF and GFF dialects
- Configuration management and validation
- End-to-end runs through the pipeline and the command line
"""
