"""Domain layer (pure logic).

- Random generators, bias, samplers and the pool allocation rules live here.
- Avoid I/O: no DB sessions, no scheduler.
- Every draw is a function of an explicit seed; time is passed in as an argument.
  ``generators.time_seed`` is the only place that reads the clock, and only when
  a caller asks for a non-reproducible seed.
"""
