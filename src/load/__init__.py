"""
Load Layer - Outbound Results

Submits classified alert sets to the scoring endpoint and holds the most
recent successful classification in memory.
"""
