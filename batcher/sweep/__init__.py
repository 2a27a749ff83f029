"""batcher.sweep

The sweep pipeline, one module per stage:

space → request → executor → classifier → aggregator (+ records) → report

`runner` wires the stages together for one run.
"""
