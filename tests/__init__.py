"""
Tests package for Workforce Exposure.

This package contains tests for:
- Org graph rollup (test_org_graph.py)
- Task-mix resolution (test_task_mix.py)
- Workforce impact and benchmarks (test_workforce_impact.py, test_benchmark.py)
- Comparative analytics (test_comparative.py, test_stats.py)
- Catalog, enrichment, settings and the refresh job

Run tests with:
    pytest tests/

Or run specific test files:
    pytest tests/test_comparative.py -v
"""
