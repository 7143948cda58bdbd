"""
Command line interface for jobgraph.
"""
