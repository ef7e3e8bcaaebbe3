#!/usr/bin/env python3
"""
Example: Basic usage of Remodular as a Python library
"""

from pathlib import Path

from remodular import analyze

# Analyze a JSON class model
result = analyze(Path(__file__).parent / "shop_model.json", threshold=0.02)

# Strongest class pairs
for (a, b), value, calls in result.coupling.ranked()[:5]:
    print(f"{a} <-> {b}: {value:.3f} ({calls} calls)")
print()

# Candidate modules
for module in result.modules:
    print(f"[{module.score:.3f}] {', '.join(module.class_names)}")

print(f"\nAnalysis complete: {len(result.modules)} module(s) from "
      f"{len(result.classes)} classes")
