"""Customization feasibility: classify a product customization request (L1-L5) and score it."""
