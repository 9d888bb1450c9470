"""
Benchmark suite for wizjson streaming parse performance.

Compares per-chunk re-parsing against full-document parsing by:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed and memory usage across generation document shapes.
"""
